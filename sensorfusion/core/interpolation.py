from __future__ import annotations

from typing import List, Optional, Sequence

from ..errors import InsufficientData
from .merge import MergedFrame, channel_series


def lerp(x: float, y: float, a: float) -> float:
    return x * (1 - a) + y * a


def interpolate_linear(
    series: Sequence[Optional[float]],
    left: Optional[float] = None,
    right: Optional[float] = None,
) -> List[float]:
    """Fill ``None`` gaps by linear interpolation between known neighbours.

    Values are treated as equally spaced. A leading gap takes ``left`` when
    given, else the first known value; a trailing gap takes ``right`` when
    given, else the last known value. A series with no known value is
    filled with ``left`` or ``right`` if either is given and raises
    :class:`InsufficientData` otherwise.
    """
    if not series:
        return []
    known = [i for i, v in enumerate(series) if v is not None]
    if not known:
        fill = left if left is not None else right
        if fill is None:
            raise InsufficientData("Cannot interpolate a series without known values")
        return [fill] * len(series)

    out: List[float] = [0.0] * len(series)
    first, last = known[0], known[-1]
    head = left if left is not None else series[first]
    tail = right if right is not None else series[last]
    for i in range(first):
        out[i] = head
    for i in range(last + 1, len(series)):
        out[i] = tail

    for a_idx, b_idx in zip(known, known[1:] + [None]):
        a = series[a_idx]
        out[a_idx] = a
        if b_idx is None:
            break
        gap = b_idx - a_idx - 1
        b = series[b_idx]
        for j in range(gap):
            out[a_idx + 1 + j] = lerp(a, b, (j + 1) / (gap + 1))
    return out


def interpolate_frames(frames: Sequence[MergedFrame], channel_count: int) -> List[MergedFrame]:
    """Interpolate every channel of a window independently.

    A channel with no known value in the window is left missing.
    """
    columns: List[List[Optional[float]]] = []
    for i in range(channel_count):
        series = channel_series(frames, i)
        if all(v is None for v in series):
            columns.append(series)
        else:
            columns.append(list(interpolate_linear(series)))
    return [
        MergedFrame(timestamp=frame.timestamp, values=tuple(col[row] for col in columns))
        for row, frame in enumerate(frames)
    ]
