"""Outlier detection on recorded times (Tukey fences and MAD modified z-score)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from benchrank.config import OUTLIER_METHODS
from benchrank.errors import InsufficientData, InvalidArgument
from benchrank.samples import SampleAggregate

MIN_OUTLIER_SAMPLES = 4
TUKEY_K = 1.5
MAD_SCALE = 0.6745
MAD_THRESHOLD = 3.5


@dataclass(frozen=True)
class OutlierReport:
    """Outliers found in a sample set.

    Attributes:
        method: Detection rule (tukey or mad)
        indices: Ascending 0-based indices of flagged observations
        lower: Lower fence (-inf when MAD is zero)
        upper: Upper fence (inf when MAD is zero)
        values: Flagged times, aligned with ``indices``
    """

    method: str
    indices: Tuple[int, ...]
    lower: float
    upper: float
    values: Tuple[int, ...]

    @property
    def count(self) -> int:
        return len(self.indices)


def _tukey_bounds(samples: SampleAggregate) -> Tuple[float, float]:
    q1 = samples.percentile(25)
    q3 = samples.percentile(75)
    iqr = q3 - q1
    return q1 - TUKEY_K * iqr, q3 + TUKEY_K * iqr


def _median_mad(times: np.ndarray) -> Tuple[float, float]:
    median = float(np.median(times))
    return median, float(np.median(np.abs(times - median)))


def outlier_report(samples: SampleAggregate, method: str = "tukey") -> OutlierReport:
    """Locate outliers in the recorded times.

    Args:
        samples: Sample set with at least 4 observations
        method: "tukey" (1.5 IQR fences) or "mad" (|0.6745 (x - median) / MAD| > 3.5)

    Returns:
        OutlierReport

    Raises:
        InvalidArgument: Unknown method
        InsufficientData: Fewer than 4 observations
    """
    if method not in OUTLIER_METHODS:
        raise InvalidArgument(f"Unknown outlier method {method!r}, expected one of {list(OUTLIER_METHODS)}")
    if samples.count < MIN_OUTLIER_SAMPLES:
        raise InsufficientData(
            f"Outlier detection needs at least {MIN_OUTLIER_SAMPLES} samples, got {samples.count}"
        )

    times = samples.time_ns.astype(float)
    if method == "tukey":
        lower, upper = _tukey_bounds(samples)
        flagged = (times < lower) | (times > upper)
    else:
        median, mad = _median_mad(times)
        if mad == 0:
            lower, upper = -np.inf, np.inf
            flagged = np.zeros(len(times), dtype=bool)
        else:
            half_width = MAD_THRESHOLD * mad / MAD_SCALE
            lower, upper = median - half_width, median + half_width
            flagged = np.abs(MAD_SCALE * (times - median) / mad) > MAD_THRESHOLD

    idx = np.flatnonzero(flagged)
    return OutlierReport(
        method=method,
        indices=tuple(int(i) for i in idx),
        lower=float(lower),
        upper=float(upper),
        values=tuple(int(v) for v in samples.time_ns[idx]),
    )


def detect_outliers(samples: SampleAggregate, method: str = "tukey") -> Tuple[int, ...]:
    """Return the ascending indices of outlying observations.

    See ``outlier_report`` for the rules and raised errors.
    """
    return outlier_report(samples, method).indices
