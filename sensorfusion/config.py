from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.features import CANONICAL_FEATURES, DEFAULT_EXTRACTION_PARAMS
from .core.windowing import WindowMode, resolve_mode


class ScalerConfig(BaseModel):
    """Pre-trained positional center/scale arrays, aligned with the feature vector."""

    center: List[float]
    scale: List[float]

    @field_validator("scale")
    @classmethod
    def _non_zero_scale(cls, v: List[float]) -> List[float]:
        if any(s == 0 for s in v):
            raise ValueError("scale entries must be non-zero")
        return v

    @model_validator(mode="after")
    def _same_length(self) -> "ScalerConfig":
        if len(self.center) != len(self.scale):
            raise ValueError(
                f"center has {len(self.center)} entries but scale has {len(self.scale)}"
            )
        return self


class LinearModelConfig(BaseModel):
    """Weights of a pre-trained linear scorer, one row per label."""

    weights: List[List[float]]
    bias: Optional[List[float]] = None

    @model_validator(mode="after")
    def _shapes(self) -> "LinearModelConfig":
        if not self.weights:
            raise ValueError("weights must have at least one row")
        width = len(self.weights[0])
        if any(len(row) != width for row in self.weights):
            raise ValueError("all weight rows must have the same length")
        if self.bias is not None and len(self.bias) != len(self.weights):
            raise ValueError("bias must have one entry per weight row")
        return self


class PredictorConfig(BaseModel):
    channels: List[str] = Field(
        default_factory=lambda: [
            "acceleration.x",
            "acceleration.y",
            "acceleration.z",
        ],
        description="Fixed, ordered channel set; defines merged frame slot order",
    )
    window_size: int = Field(
        50,
        description="Positive: last N merged frames. Negative: trailing |N| milliseconds",
    )
    windowing_mode: Optional[Literal["time", "sample"]] = Field(
        None, description="Overrides the mode encoded in the sign of window_size"
    )
    labels: List[str] = Field(default_factory=lambda: ["idle", "active"])
    scaler: Optional[ScalerConfig] = None
    store_factor: int = Field(
        10, ge=1, description="Store keeps about store_factor x window of history"
    )
    feature_names: List[str] = Field(default_factory=lambda: list(CANONICAL_FEATURES))
    extraction_params: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_EXTRACTION_PARAMS)
    )
    interpolate: bool = Field(
        False, description="Fill missing window slots by linear interpolation"
    )

    @field_validator("channels")
    @classmethod
    def _unique_channels(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("at least one channel is required")
        if len(set(v)) != len(v):
            raise ValueError("channel names must be unique")
        return v

    @field_validator("labels", "feature_names")
    @classmethod
    def _non_empty(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("window_size")
    @classmethod
    def _non_zero_window(cls, v: int) -> int:
        if v == 0:
            raise ValueError("window_size must be non-zero")
        return v

    @property
    def window_length(self) -> int:
        return abs(self.window_size)

    @property
    def window_mode(self) -> WindowMode:
        return resolve_mode(self.window_size, self.windowing_mode)

    @property
    def feature_count(self) -> int:
        return len(self.channels) * len(self.feature_names)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    LOG_LEVEL: str = "INFO"
    CONFIG_PATH: Optional[str] = None


class AppConfig(BaseModel):
    env: EnvSettings
    predictor: PredictorConfig
    model: Optional[LinearModelConfig] = None

    @field_validator("env", mode="before")
    @classmethod
    def _coerce_env(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, dict):
            return EnvSettings(**v)
        return v

    @staticmethod
    def load(config_path: Optional[Path] = None) -> "AppConfig":
        env = EnvSettings()  # loads from environment and .env

        if config_path is None and env.CONFIG_PATH:
            config_path = Path(env.CONFIG_PATH)
        if config_path is None:
            default_path = Path("config.yaml")
            config_path = default_path if default_path.exists() else None

        raw: dict = {}
        if config_path is not None:
            if not Path(config_path).exists():
                raise ValueError(f"Config file not found: {config_path}")
            with open(config_path, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}

        try:
            predictor = PredictorConfig(**(raw.get("predictor") or {}))
            model = LinearModelConfig(**raw["model"]) if raw.get("model") else None
        except ValidationError as ve:
            raise ValueError(f"Invalid config file: {ve}")
        return AppConfig(env=env, predictor=predictor, model=model)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load merged configuration from environment and optional YAML."""

    return AppConfig.load(config_path)
