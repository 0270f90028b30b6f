from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..errors import InsufficientData

if TYPE_CHECKING:
    from .merge import MergedFrame


class WindowMode(str, Enum):
    SAMPLE = "sample"  # last N merged frames
    TIME = "time"  # frames within the trailing N milliseconds


def resolve_mode(window_size: int, override: Optional[str] = None) -> WindowMode:
    """Negative sizes select time mode unless an explicit mode is given."""
    if override is not None:
        return WindowMode(override)
    return WindowMode.TIME if window_size < 0 else WindowMode.SAMPLE


def slice_by_time(frames: Sequence["MergedFrame"], keep_since: int) -> List["MergedFrame"]:
    return [f for f in frames if f.timestamp >= keep_since]


def select_window(
    frames: Sequence["MergedFrame"],
    size: int,
    mode: WindowMode,
    reference_time: int,
) -> List["MergedFrame"]:
    """Pick the trailing window out of merged frames.

    Sample mode returns exactly the last ``size`` frames and raises
    :class:`InsufficientData` when fewer exist. Time mode returns every
    frame with ``timestamp >= reference_time - size``, which may be short
    or empty.
    """
    size = abs(size)
    if mode is WindowMode.TIME:
        return slice_by_time(frames, reference_time - size)
    if len(frames) < size:
        raise InsufficientData()
    return list(frames[len(frames) - size:])
