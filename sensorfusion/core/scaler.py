from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import numpy as np

from .features import FeatureVector

if TYPE_CHECKING:
    from ..config import ScalerConfig


@dataclass(frozen=True)
class Scaler:
    """Positional robust-scaler parameters: ``(x[i] - center[i]) / scale[i]``."""

    center: Tuple[float, ...]
    scale: Tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.center) != len(self.scale):
            raise ValueError("center and scale must have the same length")

    @classmethod
    def from_config(cls, cfg: "ScalerConfig") -> "Scaler":
        return cls(center=tuple(cfg.center), scale=tuple(cfg.scale))

    def __len__(self) -> int:
        return len(self.center)

    def apply(self, values: Sequence[float]) -> List[float]:
        if len(values) != len(self.center):
            raise ValueError(
                f"Scaler expects {len(self.center)} features, got {len(values)}"
            )
        x = np.asarray(values, dtype=float)
        return ((x - np.asarray(self.center)) / np.asarray(self.scale)).tolist()


def apply_scaler(vector: FeatureVector, scaler: Optional[Scaler]) -> FeatureVector:
    if scaler is None:
        return vector
    return FeatureVector(names=list(vector.names), values=scaler.apply(vector.values))
