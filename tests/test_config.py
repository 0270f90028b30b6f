from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sensorfusion.config import AppConfig, PredictorConfig, ScalerConfig
from sensorfusion.core.windowing import WindowMode


def test_defaults() -> None:
    cfg = PredictorConfig()
    assert cfg.store_factor == 10
    assert cfg.feature_names[:3] == ["sum", "median", "mean"]
    assert cfg.window_mode is WindowMode.SAMPLE
    assert cfg.feature_count == len(cfg.channels) * 10


def test_window_sign_and_override() -> None:
    cfg = PredictorConfig(window_size=-500)
    assert cfg.window_mode is WindowMode.TIME
    assert cfg.window_length == 500
    assert PredictorConfig(window_size=-500, windowing_mode="sample").window_mode is WindowMode.SAMPLE
    assert PredictorConfig(window_size=5, windowing_mode="time").window_mode is WindowMode.TIME


def test_validation_errors() -> None:
    with pytest.raises(ValidationError):
        PredictorConfig(window_size=0)
    with pytest.raises(ValidationError):
        PredictorConfig(channels=["a", "a"])
    with pytest.raises(ValidationError):
        PredictorConfig(labels=[])
    with pytest.raises(ValidationError):
        ScalerConfig(center=[0.0], scale=[0.0])
    with pytest.raises(ValidationError):
        ScalerConfig(center=[0.0, 1.0], scale=[1.0])


def test_load_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "predictor:\n"
        "  channels: [x, y]\n"
        "  window_size: -1000\n"
        "  labels: [a, b]\n"
        "model:\n"
        "  weights: [[1, 2], [3, 4]]\n",
        encoding="utf-8",
    )
    cfg = AppConfig.load(path)
    assert cfg.predictor.channels == ["x", "y"]
    assert cfg.predictor.window_mode is WindowMode.TIME
    assert cfg.model is not None and cfg.model.bias is None


def test_load_invalid_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "cfg.yaml"
    path.write_text("predictor:\n  window_size: 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid config"):
        AppConfig.load(path)
    with pytest.raises(ValueError, match="not found"):
        AppConfig.load(tmp_path / "missing.yaml")
