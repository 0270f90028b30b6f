from __future__ import annotations

import logging
import math
import numbers
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import InvalidInput
from .windowing import WindowMode


logger = logging.getLogger(__name__)


def utc_now_ms() -> int:
    return int(time.time() * 1000)


def _is_number(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class Sample:
    timestamp: int
    value: float


@dataclass(frozen=True)
class StoreSnapshot:
    """Consistent, immutable view of every channel buffer."""

    buffers: Dict[str, Tuple[Sample, ...]]
    last_add_time: int


class SampleStore:
    """Thread-safe per-channel sample buffers with amortized pruning.

    In time mode buffers are trimmed to the trailing window only once the
    high-water mark has moved more than ``factor * window`` ms past the last
    prune. In sample mode a buffer is trimmed back to ``factor * window``
    entries once it holds more than twice that many.
    """

    def __init__(
        self,
        channels: Sequence[str],
        window: int,
        mode: WindowMode,
        factor: int = 10,
    ) -> None:
        self._channels: Tuple[str, ...] = tuple(channels)
        self._window: int = abs(window)
        self._mode = mode
        self._factor = factor
        self._buffers: Dict[str, List[Sample]] = {c: [] for c in self._channels}
        self._last_add_time: int = 0
        self._last_prune_time: int = 0
        self._lock = threading.RLock()

    @property
    def channels(self) -> Tuple[str, ...]:
        return self._channels

    @property
    def last_add_time(self) -> int:
        with self._lock:
            return self._last_add_time

    def add(self, channel: str, value: float, timestamp: Optional[float] = None) -> Sample:
        if channel not in self._buffers:
            raise InvalidInput(f"Sensor is not valid: {channel!r}")
        if not _is_number(value) or math.isnan(value):
            raise InvalidInput(f"Datapoint is not a number: {value!r}")
        if timestamp is None:
            ts = utc_now_ms()
        elif _is_number(timestamp) and math.isfinite(timestamp):
            ts = int(math.floor(timestamp))
        else:
            raise InvalidInput(f"Timestamp is not a number: {timestamp!r}")

        sample = Sample(timestamp=ts, value=float(value))
        with self._lock:
            self._buffers[channel].append(sample)
            if ts > self._last_add_time:
                self._last_add_time = ts
            self._prune()
        return sample

    def size(self, channel: str) -> int:
        with self._lock:
            return len(self._buffers[channel])

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                buffers={c: tuple(buf) for c, buf in self._buffers.items()},
                last_add_time=self._last_add_time,
            )

    def _prune(self) -> None:
        # Buffers are replaced, never trimmed in place, so snapshots taken
        # earlier keep their contents.
        if self._mode is WindowMode.TIME:
            if self._last_add_time - self._last_prune_time <= self._factor * self._window:
                return
            self._last_prune_time = self._last_add_time
            keep_since = self._last_add_time - self._window
            for channel, buf in self._buffers.items():
                kept = [s for s in buf if s.timestamp >= keep_since]
                if len(kept) != len(buf):
                    logger.debug(
                        "pruned channel",
                        extra={"channel": channel, "dropped": len(buf) - len(kept)},
                    )
                self._buffers[channel] = kept
        else:
            keep = self._factor * self._window
            for channel, buf in self._buffers.items():
                if len(buf) > 2 * keep:
                    self._buffers[channel] = buf[len(buf) - keep:]
                    logger.debug(
                        "pruned channel",
                        extra={"channel": channel, "dropped": len(buf) - keep},
                    )
