from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ..config import PredictorConfig, ScalerConfig
from .classify import Prediction, ScoringFunction, classify
from .features import EngineHandle, FeatureVector, extract_vector
from .interpolation import interpolate_frames
from .merge import MergedFrame, channel_series, merge
from .scaler import Scaler, apply_scaler
from .store import SampleStore
from .windowing import select_window


logger = logging.getLogger(__name__)


class Predictor:
    """Ingests channel samples and classifies the trailing window on demand.

    ``add_datapoint`` is synchronous. ``predict`` is a coroutine that works
    on a snapshot of the store taken when it starts, so ingestion may go on
    while it waits on the extraction engine or the scoring function.
    """

    def __init__(
        self,
        config: PredictorConfig,
        scoring: ScoringFunction,
        engine: Optional[EngineHandle] = None,
    ) -> None:
        self.config = config
        self.scoring = scoring
        self.engine = engine if engine is not None else EngineHandle()
        self.scaler: Optional[Scaler] = (
            Scaler.from_config(config.scaler) if config.scaler is not None else None
        )
        if self.scaler is not None and len(self.scaler) != config.feature_count:
            raise ValueError(
                f"Scaler has {len(self.scaler)} entries but {len(config.channels)} channels x "
                f"{len(config.feature_names)} features give {config.feature_count}"
            )
        self.store = SampleStore(
            channels=config.channels,
            window=config.window_length,
            mode=config.window_mode,
            factor=config.store_factor,
        )

    @classmethod
    def create(
        cls,
        scoring: ScoringFunction,
        channels: Sequence[str],
        window_size: int,
        labels: Sequence[str],
        scaler: Optional[Tuple[Sequence[float], Sequence[float]]] = None,
        windowing_mode: Optional[str] = None,
        engine: Optional[EngineHandle] = None,
        **options: object,
    ) -> "Predictor":
        """Build a Predictor from plain arguments instead of a config model."""
        cfg = PredictorConfig(
            channels=list(channels),
            window_size=window_size,
            labels=list(labels),
            scaler=ScalerConfig(center=list(scaler[0]), scale=list(scaler[1])) if scaler else None,
            windowing_mode=windowing_mode,
            **options,
        )
        return cls(cfg, scoring, engine=engine)

    @property
    def channels(self) -> List[str]:
        return list(self.config.channels)

    def add_datapoint(self, channel: str, value: float, timestamp: Optional[float] = None) -> None:
        self.store.add(channel, value, timestamp)

    def window(self) -> List[MergedFrame]:
        """Merged frames of the current trailing window."""
        snap = self.store.snapshot()
        frames = merge(snap.buffers, self.config.channels)
        return select_window(
            frames,
            self.config.window_length,
            self.config.window_mode,
            reference_time=snap.last_add_time,
        )

    async def extract(self, frames: Sequence[MergedFrame]) -> FeatureVector:
        """Feature vector of a window, before scaling."""
        channel_count = len(self.config.channels)
        if self.config.interpolate:
            frames = interpolate_frames(frames, channel_count)
        columns = [
            [v for v in channel_series(frames, i) if v is not None]
            for i in range(channel_count)
        ]
        engine = await self.engine.get()
        return await extract_vector(
            engine,
            columns,
            self.config.feature_names,
            self.config.extraction_params,
        )

    async def predict(self) -> Prediction:
        frames = self.window()
        features = apply_scaler(await self.extract(frames), self.scaler)
        prediction = await classify(features.values, self.scoring, self.config.labels)
        logger.debug(
            "prediction",
            extra={"label": prediction.label, "frames": len(frames)},
        )
        return prediction
