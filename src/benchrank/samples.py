"""Fixed-capacity store of benchmark observations with running statistics."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Dict, Iterator, NamedTuple, Optional, Sequence

import numpy as np
from pydantic import ValidationError

from benchrank.errors import CapacityExceeded, InvalidArgument, InvalidState
from benchrank.io.schema import ARRAY_FIELDS, SamplesRecord

logger = logging.getLogger(__name__)

DEFAULT_CL = 95.0
DEFAULT_RCIW = 5.0
MAX_NAME_LENGTH = 255


class Observation(NamedTuple):
    """One measured operation."""

    time_ns: int
    before_kb: int
    after_kb: int
    allocated_kb: int


def _check_count(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise InvalidArgument(f"{label} must be a non-negative integer, got {value!r}")
    return int(value)


def _check_percent(value: Any, label: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{label} must be a number, got {value!r}") from None
    if not (0.0 < value <= 100.0):
        raise InvalidArgument(f"{label} must be in (0, 100], got {value}")
    return value


class SampleAggregate:
    """Append-only sample set with incremental (Welford) statistics.

    Observations are stored in preallocated ``int64`` arrays of length
    ``capacity``. Count, sum, min, max, mean and M2 are updated on every
    append, so ``mean``/``variance`` never rescan the data.

    Parameters
    ----------
    capacity : int
        Maximum number of observations (> 0)
    name : str, optional
        Sample set name (at most 255 characters)
    gc_step : int
        GC mode: -1 disabled, 0 full collection, > 0 step size in KB.
        Negative values normalize to -1.
    base_kb : int
        Baseline memory in KB
    cl : float
        Confidence level in percent, in (0, 100]
    rciw : float
        Target relative confidence interval width in percent, in (0, 100]
    """

    def __init__(
        self,
        capacity: int,
        name: Optional[str] = None,
        gc_step: int = -1,
        base_kb: int = 0,
        cl: float = DEFAULT_CL,
        rciw: float = DEFAULT_RCIW,
    ):
        capacity = _check_count(capacity, "capacity")
        if capacity == 0:
            raise InvalidArgument("capacity must be greater than 0")

        self._capacity = capacity
        self._time_ns = np.zeros(capacity, dtype=np.int64)
        self._before_kb = np.zeros(capacity, dtype=np.int64)
        self._after_kb = np.zeros(capacity, dtype=np.int64)
        self._allocated_kb = np.zeros(capacity, dtype=np.int64)

        self.name = name
        self.gc_step = gc_step
        self.base_kb = base_kb
        self.cl = cl
        self.rciw = rciw
        self._reset()

    def _reset(self) -> None:
        self._count = 0
        self._sum = 0
        self._min: Optional[int] = None
        self._max: Optional[int] = None
        self._mean = 0.0
        self._m2 = 0.0

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def name(self) -> Optional[str]:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        if value is not None:
            if not isinstance(value, str):
                raise InvalidArgument(f"name must be a string, got {type(value).__name__}")
            if len(value) > MAX_NAME_LENGTH:
                raise InvalidArgument(f"name must be at most {MAX_NAME_LENGTH} characters")
        self._name = value

    @property
    def gc_step(self) -> int:
        return self._gc_step

    @gc_step.setter
    def gc_step(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidArgument(f"gc_step must be an integer, got {value!r}")
        self._gc_step = -1 if value < 0 else int(value)

    @property
    def base_kb(self) -> int:
        return self._base_kb

    @base_kb.setter
    def base_kb(self, value: int) -> None:
        self._base_kb = _check_count(value, "base_kb")

    @property
    def cl(self) -> float:
        return self._cl

    @cl.setter
    def cl(self, value: float) -> None:
        self._cl = _check_percent(value, "cl")

    @property
    def rciw(self) -> float:
        return self._rciw

    @rciw.setter
    def rciw(self, value: float) -> None:
        self._rciw = _check_percent(value, "rciw")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, time_ns: int, before_kb: int = 0, after_kb: int = 0) -> None:
        """Record one observation and update the running statistics."""
        if self._count >= self._capacity:
            raise CapacityExceeded(f"sample aggregate is full (capacity={self._capacity})")

        time_ns = _check_count(time_ns, "time_ns")
        before_kb = _check_count(before_kb, "before_kb")
        after_kb = _check_count(after_kb, "after_kb")

        i = self._count
        self._time_ns[i] = time_ns
        self._before_kb[i] = before_kb
        self._after_kb[i] = after_kb
        self._allocated_kb[i] = after_kb - before_kb if after_kb > before_kb else 0

        self._count += 1
        self._sum += time_ns
        self._min = time_ns if self._min is None else min(self._min, time_ns)
        self._max = time_ns if self._max is None else max(self._max, time_ns)

        delta = time_ns - self._mean
        self._mean += delta / self._count
        self._m2 += delta * (time_ns - self._mean)

    def clear(self) -> None:
        """Discard all observations, keeping capacity and configuration."""
        self._reset()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    @property
    def total(self) -> int:
        """Sum of all recorded times in nanoseconds."""
        return self._sum

    @property
    def m2(self) -> float:
        return self._m2

    @property
    def time_ns(self) -> np.ndarray:
        return self._readonly(self._time_ns)

    @property
    def before_kb(self) -> np.ndarray:
        return self._readonly(self._before_kb)

    @property
    def after_kb(self) -> np.ndarray:
        return self._readonly(self._after_kb)

    @property
    def allocated_kb(self) -> np.ndarray:
        return self._readonly(self._allocated_kb)

    def _readonly(self, arr: np.ndarray) -> np.ndarray:
        view = arr[: self._count]
        view.flags.writeable = False
        return view

    def observations(self) -> Iterator[Observation]:
        """Iterate over recorded observations in insertion order."""
        for i in range(self._count):
            yield Observation(
                int(self._time_ns[i]),
                int(self._before_kb[i]),
                int(self._after_kb[i]),
                int(self._allocated_kb[i]),
            )

    def min(self) -> float:
        return float(self._min) if self._count > 0 else math.nan

    def max(self) -> float:
        return float(self._max) if self._count > 0 else math.nan

    def mean(self) -> float:
        return self._mean if self._count > 0 else math.nan

    def variance(self) -> float:
        """Unbiased sample variance, NaN with fewer than two observations."""
        if self._count < 2:
            return math.nan
        return self._m2 / (self._count - 1)

    def stddev(self) -> float:
        var = self.variance()
        return math.sqrt(var) if var == var else math.nan

    def stderr(self) -> float:
        sd = self.stddev()
        return sd / math.sqrt(self._count) if sd == sd else math.nan

    def percentile(self, q: float) -> float:
        """Linearly interpolated percentile of the recorded times.

        Args:
            q: Percentile in [0, 100]

        Returns:
            Interpolated value, or NaN when empty
        """
        q = float(q)
        if not (0.0 <= q <= 100.0):
            raise InvalidArgument(f"percentile must be in [0, 100], got {q}")
        if self._count == 0:
            return math.nan
        return float(np.percentile(self._time_ns[: self._count], q))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def export(self) -> Dict[str, Any]:
        """Serialize to a flat record restorable with ``restore``."""
        n = self._count
        return {
            "capacity": self._capacity,
            "count": n,
            "time_ns": self._time_ns[:n].tolist(),
            "before_kb": self._before_kb[:n].tolist(),
            "after_kb": self._after_kb[:n].tolist(),
            "allocated_kb": self._allocated_kb[:n].tolist(),
            "gc_step": self._gc_step,
            "base_kb": self._base_kb,
            "cl": self._cl,
            "rciw": self._rciw,
            "name": self._name,
            "sum": self._sum,
            "min": self._min,
            "max": self._max,
            "mean": self._mean,
            "M2": self._m2,
        }

    @classmethod
    def restore(cls, record: Dict[str, Any]) -> "SampleAggregate":
        """Rebuild an aggregate from an exported record.

        Aggregate fields are taken verbatim from the record.

        Raises:
            InvalidState: The record fails validation
        """
        try:
            rec = SamplesRecord.model_validate(record)
        except ValidationError as e:
            raise InvalidState(f"invalid samples record: {e}") from e

        obj = cls(
            rec.capacity,
            name=rec.name,
            gc_step=rec.gc_step,
            base_kb=rec.base_kb,
            cl=rec.cl,
            rciw=rec.rciw,
        )
        n = rec.count
        for field_name in ARRAY_FIELDS:
            getattr(obj, f"_{field_name}")[:n] = getattr(rec, field_name)

        obj._count = n
        obj._sum = rec.sum
        obj._min = rec.min
        obj._max = rec.max
        obj._mean = rec.mean
        obj._m2 = rec.M2
        logger.debug("Restored sample aggregate %r with %d observations", rec.name, n)
        return obj

    @classmethod
    def merge(cls, name: Optional[str], aggregates: Sequence["SampleAggregate"]) -> "SampleAggregate":
        """Concatenate the observations of several aggregates into a new one.

        The result has capacity equal to the combined count and inherits the
        confidence settings of the first aggregate.
        """
        total = sum(a.count for a in aggregates)
        if total == 0:
            raise InvalidArgument("cannot merge aggregates without observations")

        first = aggregates[0]
        merged = cls(total, name=name, cl=first.cl, rciw=first.rciw)
        for agg in aggregates:
            for obs in agg.observations():
                merged.append(obs.time_ns, obs.before_kb, obs.after_kb)
        return merged

    def __repr__(self) -> str:
        return (
            f"SampleAggregate(name={self._name!r}, count={self._count}, "
            f"capacity={self._capacity}, mean={self.mean():.6g})"
        )
