from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .store import Sample


@dataclass(frozen=True)
class MergedFrame:
    """One time-aligned row; ``None`` marks a channel without a sample at ``timestamp``."""

    timestamp: int
    values: Tuple[Optional[float], ...]


def merge(buffers: Mapping[str, Sequence[Sample]], channels: Sequence[str]) -> List[MergedFrame]:
    """Exact-time join of channel buffers onto their union of timestamps.

    Frames are sorted by numeric timestamp. When one channel holds several
    samples with the same timestamp, the last one inserted wins.
    """
    rows: Dict[int, Dict[str, float]] = {}
    for channel in channels:
        for sample in buffers.get(channel, ()):
            rows.setdefault(sample.timestamp, {})[channel] = sample.value

    return [
        MergedFrame(
            timestamp=ts,
            values=tuple(rows[ts].get(channel) for channel in channels),
        )
        for ts in sorted(rows)
    ]


def channel_series(frames: Sequence[MergedFrame], index: int) -> List[Optional[float]]:
    return [frame.values[index] for frame in frames]
