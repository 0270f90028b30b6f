from __future__ import annotations

import pytest

from sensorfusion.core.interpolation import interpolate_frames, interpolate_linear, lerp
from sensorfusion.core.merge import MergedFrame
from sensorfusion.errors import InsufficientData


def test_lerp() -> None:
    assert lerp(0.0, 10.0, 0.25) == 2.5


def test_interpolate_gaps_and_edges() -> None:
    series = [None, None, 5.0, None, 10.0, None, None]
    assert interpolate_linear(series) == [5.0, 5.0, 5.0, 7.5, 10.0, 10.0, 10.0]


def test_interpolate_multi_gap() -> None:
    assert interpolate_linear([0.0, None, None, 3.0]) == pytest.approx([0.0, 1.0, 2.0, 3.0])


def test_interpolate_with_boundaries() -> None:
    assert interpolate_linear([None, 4.0, None], left=1.0, right=9.0) == [1.0, 4.0, 9.0]


def test_interpolate_all_missing() -> None:
    assert interpolate_linear([]) == []
    assert interpolate_linear([None, None], left=2.0) == [2.0, 2.0]
    with pytest.raises(InsufficientData):
        interpolate_linear([None, None])


def test_interpolate_frames_per_channel() -> None:
    frames = [
        MergedFrame(1, (1.0, None)),
        MergedFrame(2, (None, 4.0)),
        MergedFrame(3, (3.0, 6.0)),
    ]
    out = interpolate_frames(frames, 2)
    assert [f.values for f in out] == [(1.0, 4.0), (2.0, 4.0), (3.0, 6.0)]
    assert [f.timestamp for f in out] == [1, 2, 3]


def test_interpolate_frames_leaves_silent_channel_missing() -> None:
    frames = [MergedFrame(1, (1.0, None)), MergedFrame(2, (None, None)), MergedFrame(3, (3.0, None))]
    out = interpolate_frames(frames, 2)
    assert [f.values for f in out] == [(1.0, None), (2.0, None), (3.0, None)]
