from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Optional, Tuple, Union

if TYPE_CHECKING:
    from ..core.predict import Predictor


class ChannelKind(str, Enum):
    ORIENTATION = "deviceorientation"
    MOTION = "devicemotion"


@dataclass(frozen=True)
class Vector3:
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None


@dataclass(frozen=True)
class RotationRate:
    alpha: Optional[float] = None
    beta: Optional[float] = None
    gamma: Optional[float] = None


@dataclass(frozen=True)
class OrientationEvent:
    """Device orientation angles in degrees."""

    timestamp: float
    alpha: Optional[float] = None
    beta: Optional[float] = None
    gamma: Optional[float] = None

    kind = ChannelKind.ORIENTATION


@dataclass(frozen=True)
class MotionEvent:
    """Device motion reading; any group may be absent on a given device."""

    timestamp: float
    acceleration: Optional[Vector3] = None
    acceleration_including_gravity: Optional[Vector3] = None
    rotation_rate: Optional[RotationRate] = None

    kind = ChannelKind.MOTION


SensorEvent = Union[OrientationEvent, MotionEvent]


def _vec(get: Callable[[MotionEvent], Optional[Vector3]], axis: str) -> Callable[[MotionEvent], Optional[float]]:
    def read(evt: MotionEvent) -> Optional[float]:
        v = get(evt)
        return None if v is None else getattr(v, axis)

    return read


def _rot(axis: str) -> Callable[[MotionEvent], Optional[float]]:
    def read(evt: MotionEvent) -> Optional[float]:
        r = evt.rotation_rate
        return None if r is None else getattr(r, axis)

    return read


ORIENTATION_CHANNELS: Dict[str, Callable[[OrientationEvent], Optional[float]]] = {
    "alpha": lambda e: e.alpha,
    "beta": lambda e: e.beta,
    "gamma": lambda e: e.gamma,
}

MOTION_CHANNELS: Dict[str, Callable[[MotionEvent], Optional[float]]] = {
    "acceleration.x": _vec(lambda e: e.acceleration, "x"),
    "acceleration.y": _vec(lambda e: e.acceleration, "y"),
    "acceleration.z": _vec(lambda e: e.acceleration, "z"),
    "accelerationIncludingGravity.x": _vec(lambda e: e.acceleration_including_gravity, "x"),
    "accelerationIncludingGravity.y": _vec(lambda e: e.acceleration_including_gravity, "y"),
    "accelerationIncludingGravity.z": _vec(lambda e: e.acceleration_including_gravity, "z"),
    "rotationRate.alpha": _rot("alpha"),
    "rotationRate.beta": _rot("beta"),
    "rotationRate.gamma": _rot("gamma"),
}

ACCESSORS: Dict[ChannelKind, Dict[str, Callable]] = {
    ChannelKind.ORIENTATION: ORIENTATION_CHANNELS,
    ChannelKind.MOTION: MOTION_CHANNELS,
}


def channel_values(event: SensorEvent) -> Iterator[Tuple[str, Optional[float]]]:
    """Yield ``(channel, value)`` for every channel of the event's kind."""
    for name, read in ACCESSORS[event.kind].items():
        yield name, read(event)


def record_event(predictor: "Predictor", event: SensorEvent) -> int:
    """Forward the present values of an event into ``predictor``.

    Channels the predictor was not configured with are ignored. Returns the
    number of samples added.
    """
    timestamp = math.floor(event.timestamp)
    configured = set(predictor.channels)
    added = 0
    for name, value in channel_values(event):
        if value is None or name not in configured:
            continue
        predictor.add_datapoint(name, value, timestamp)
        added += 1
    return added
