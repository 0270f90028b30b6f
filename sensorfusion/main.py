from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from .config import AppConfig, load_config
from .core.classify import LinearScorer
from .core.features import feature_identifiers
from .core.predict import Predictor
from .data.replay import ReplayRunner, parse_csv
from .utils.logging import setup_logging


app = typer.Typer(add_completion=False)
logger = logging.getLogger(__name__)


def build_predictor(cfg: AppConfig) -> Predictor:
    if cfg.model is None:
        raise typer.BadParameter("config has no 'model' section with scorer weights")
    scorer = LinearScorer(cfg.model.weights, cfg.model.bias)
    if scorer.weights.shape[0] != len(cfg.predictor.labels):
        raise typer.BadParameter(
            f"model has {scorer.weights.shape[0]} weight rows for {len(cfg.predictor.labels)} labels"
        )
    return Predictor(cfg.predictor, scorer)


@app.command()
def features(
    config: Optional[Path] = typer.Option(None, help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, help="Overrides LOG_LEVEL"),
) -> None:
    """Print the ordered feature identifiers the scaler and model must match."""
    cfg = load_config(config)
    setup_logging(log_level or cfg.env.LOG_LEVEL)
    names = feature_identifiers(len(cfg.predictor.channels), cfg.predictor.feature_names)
    logger.debug("feature identifiers", extra={"count": len(names)})
    for name in names:
        typer.echo(name)


@app.command()
def replay(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="timestamp,channel,value CSV"),
    config: Optional[Path] = typer.Option(None, help="YAML config file"),
    every: int = typer.Option(1, min=1, help="Predict after every N ingested rows"),
    log_level: Optional[str] = typer.Option(None, help="Overrides LOG_LEVEL"),
) -> None:
    """Replay recorded samples and print one JSON prediction per line."""
    cfg = load_config(config)
    setup_logging(log_level or cfg.env.LOG_LEVEL)

    predictor = build_predictor(cfg)
    rows = parse_csv(csv_path.read_text(encoding="utf-8"))
    logger.info("replay started", extra={"rows": len(rows), "path": str(csv_path)})

    runner = ReplayRunner(predictor, every=every)
    results = asyncio.run(runner.run(rows))
    for res in results:
        typer.echo(json.dumps({"timestamp": res.timestamp, **res.prediction.to_dict()}))
    logger.info("replay finished", extra={"predictions": len(results)})


if __name__ == "__main__":
    app()
