from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
)

import numpy as np

from ..errors import ExtractionFailure


# Order agreed with the training side; scaler and classifier parameters are
# positional over channel index, then this list.
CANONICAL_FEATURES: Tuple[str, ...] = (
    "sum",
    "median",
    "mean",
    "length",
    "std_dev",
    "var",
    "root_mean_square",
    "max",
    "abs_max",
    "min",
)

DEFAULT_EXTRACTION_PARAMS: Dict[str, float] = {
    "mean_n_abs_max_n": 8,
    "change_quantile_lower": -0.1,
    "change_quantile_upper": 0.1,
    "change_quantile_aggr": 0,
    "range_count_lower": -1,
    "range_count_upper": 1,
    "count_above_x": 0,
    "count_below_x": 0,
    "quantile_q": 0.5,
    "autocorrelation_lag": 1,
}


class ExtractionEngine(Protocol):
    def extract_features(
        self,
        feature_names: List[str],
        series: List[float],
        params: Dict[str, float],
    ) -> Union[Mapping[str, float], Awaitable[Mapping[str, float]]]:
        ...


FeatureFunc = Callable[[np.ndarray, Mapping[str, float]], float]


@dataclass
class FeatureSpec:
    key: str
    compute: FeatureFunc
    empty_value: float = float("nan")


def build_registry() -> Dict[str, FeatureSpec]:
    specs = [
        FeatureSpec("sum", lambda x, p: float(np.sum(x)), empty_value=0.0),
        FeatureSpec("median", lambda x, p: float(np.median(x))),
        FeatureSpec("mean", lambda x, p: float(np.mean(x))),
        FeatureSpec("length", lambda x, p: float(x.size), empty_value=0.0),
        FeatureSpec("std_dev", lambda x, p: float(np.std(x))),
        FeatureSpec("var", lambda x, p: float(np.var(x))),
        FeatureSpec("root_mean_square", lambda x, p: float(np.sqrt(np.mean(x * x)))),
        FeatureSpec("max", lambda x, p: float(np.max(x))),
        FeatureSpec("abs_max", lambda x, p: float(np.max(np.abs(x)))),
        FeatureSpec("min", lambda x, p: float(np.min(x))),
    ]
    return {s.key: s for s in specs}


class NumpyFeatureEngine:
    """Reference extraction engine covering the canonical feature list.

    Statistics are population statistics (``ddof=0``). It holds no mutable
    state after construction and is safe to share between concurrent
    predictions.
    """

    def __init__(self) -> None:
        self._registry = build_registry()

    def supported(self) -> List[str]:
        return list(self._registry)

    def extract_features(
        self,
        feature_names: List[str],
        series: List[float],
        params: Dict[str, float],
    ) -> Dict[str, float]:
        unknown = [n for n in feature_names if n not in self._registry]
        if unknown:
            raise ExtractionFailure(f"Unsupported features: {unknown}")
        x = np.asarray(series, dtype=float)
        out: Dict[str, float] = {}
        for name in feature_names:
            spec = self._registry[name]
            out[name] = spec.empty_value if x.size == 0 else spec.compute(x, params)
        return out


EngineFactory = Callable[[], Union[ExtractionEngine, Awaitable[ExtractionEngine]]]


class EngineHandle:
    """Shared, lazily constructed extraction engine.

    The factory runs at most once per handle, even when several coroutines
    ask for the engine at the same time. Create one handle and pass it to
    every Predictor that should share the engine. The guard lock belongs to
    the event loop that is building the engine; a handle whose build failed
    can be retried from another loop.
    """

    def __init__(self, factory: EngineFactory = NumpyFeatureEngine) -> None:
        self._factory = factory
        self._engine: Optional[ExtractionEngine] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def ready(self) -> bool:
        return self._engine is not None

    def _loop_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def get(self) -> ExtractionEngine:
        if self._engine is not None:
            return self._engine
        async with self._loop_lock():
            if self._engine is None:
                engine = self._factory()
                if inspect.isawaitable(engine):
                    engine = await engine
                self._engine = engine
        return self._engine


@dataclass
class FeatureVector:
    names: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(zip(self.names, self.values))

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.names, self.values))


def feature_identifiers(channel_count: int, feature_names: Sequence[str]) -> List[str]:
    return [f"{i}__{name}" for i in range(channel_count) for name in feature_names]


async def extract_channel(
    engine: ExtractionEngine,
    series: Sequence[float],
    feature_names: Sequence[str],
    params: Mapping[str, float],
) -> List[float]:
    """Run the engine on one channel and return values in ``feature_names`` order.

    The order of the mapping returned by the engine is ignored.
    """
    result: Any = engine.extract_features(list(feature_names), list(series), dict(params))
    if inspect.isawaitable(result):
        result = await result
    missing = [n for n in feature_names if n not in result]
    if missing:
        raise ExtractionFailure(f"Engine result is missing features: {missing}")
    return [float(result[n]) for n in feature_names]


async def extract_vector(
    engine: ExtractionEngine,
    channels: Sequence[Sequence[float]],
    feature_names: Sequence[str],
    params: Mapping[str, float],
) -> FeatureVector:
    """Concatenate per-channel features in channel index order."""
    values: List[float] = []
    for series in channels:
        values.extend(await extract_channel(engine, series, feature_names, params))
    return FeatureVector(names=feature_identifiers(len(channels), feature_names), values=values)
