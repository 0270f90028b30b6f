from __future__ import annotations

import asyncio

import pytest

from sensorfusion.core.classify import LinearScorer, Prediction, argmax_first, classify
from sensorfusion.errors import ClassificationFailure


def test_first_maximum_wins() -> None:
    pred = asyncio.run(classify([1.0], lambda x: [0.1, 0.9, 0.9], ["a", "b", "c"]))
    assert pred == Prediction(label="b", scores=(0.1, 0.9, 0.9))
    assert pred.to_dict() == {"prediction": "b", "result": [0.1, 0.9, 0.9]}


def test_scoring_receives_plain_values() -> None:
    seen = []

    def scoring(x):  # type: ignore[no-untyped-def]
        seen.append(x)
        return [0.0, 1.0]

    asyncio.run(classify((2.0, 3.0), scoring, ["a", "b"]))
    assert seen == [[2.0, 3.0]]


def test_async_scoring() -> None:
    async def scoring(x):  # type: ignore[no-untyped-def]
        return [3.0, 1.0]

    assert asyncio.run(classify([0.0], scoring, ["a", "b"])).label == "a"


def test_score_count_mismatch() -> None:
    with pytest.raises(ClassificationFailure):
        asyncio.run(classify([0.0], lambda x: [1.0], ["a", "b"]))
    with pytest.raises(ClassificationFailure):
        argmax_first([])


def test_scoring_errors_propagate_unchanged() -> None:
    def scoring(x):  # type: ignore[no-untyped-def]
        raise RuntimeError("model crashed")

    with pytest.raises(RuntimeError, match="model crashed"):
        asyncio.run(classify([0.0], scoring, ["a"]))


def test_linear_scorer() -> None:
    scorer = LinearScorer([[1.0, 0.0], [0.0, 2.0]], bias=[0.5, 0.0])
    assert scorer([1.0, 1.0]) == [1.5, 2.0]
    with pytest.raises(ClassificationFailure):
        scorer([1.0])
    with pytest.raises(ValueError):
        LinearScorer([[1.0]], bias=[1.0, 2.0])
