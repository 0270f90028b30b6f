from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import ClassificationFailure


ScoringFunction = Callable[[List[float]], Union[Sequence[float], Awaitable[Sequence[float]]]]


@dataclass(frozen=True)
class Prediction:
    label: str
    scores: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"prediction": self.label, "result": list(self.scores)}


def argmax_first(scores: Sequence[float]) -> int:
    """Index of the largest score; ties go to the lowest index."""
    if len(scores) == 0:
        raise ClassificationFailure("Scoring function returned no scores")
    best = 0
    for i, s in enumerate(scores):
        if s > scores[best]:
            best = i
    return best


async def classify(
    values: Sequence[float],
    scoring: ScoringFunction,
    labels: Sequence[str],
) -> Prediction:
    result = scoring(list(values))
    if inspect.isawaitable(result):
        result = await result
    scores = tuple(float(s) for s in result)
    if len(scores) != len(labels):
        raise ClassificationFailure(
            f"Scoring function returned {len(scores)} scores for {len(labels)} labels"
        )
    return Prediction(label=labels[argmax_first(scores)], scores=scores)


class LinearScorer:
    """Pre-trained linear scoring function, ``scores = W @ x + b``."""

    def __init__(self, weights: Sequence[Sequence[float]], bias: Optional[Sequence[float]] = None) -> None:
        self.weights = np.asarray(weights, dtype=float)
        if self.weights.ndim != 2:
            raise ValueError("weights must be a 2-D matrix")
        self.bias = (
            np.zeros(self.weights.shape[0]) if bias is None else np.asarray(bias, dtype=float)
        )
        if self.bias.shape != (self.weights.shape[0],):
            raise ValueError("bias must have one entry per weight row")

    def __call__(self, features: List[float]) -> List[float]:
        x = np.asarray(features, dtype=float)
        if x.shape != (self.weights.shape[1],):
            raise ClassificationFailure(
                f"Linear scorer expects {self.weights.shape[1]} features, got {x.size}"
            )
        return (self.weights @ x + self.bias).tolist()
