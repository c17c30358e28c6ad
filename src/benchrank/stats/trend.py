"""Drift detection over observation order."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
from scipy import stats

from benchrank.samples import SampleAggregate

MIN_TREND_SAMPLES = 3
STABILITY_THRESHOLD = 0.1


class TrendResult(NamedTuple):
    """Least-squares trend of time_ns against observation index."""

    slope: float
    correlation: float
    stable: bool


def trend(samples: SampleAggregate) -> TrendResult:
    """Fit time against observation order.

    Args:
        samples: Sample set

    Returns:
        TrendResult; a set is stable when |correlation| < 0.1. Fewer than
        three observations report a flat, stable trend.
    """
    if samples.count < MIN_TREND_SAMPLES:
        return TrendResult(0.0, 0.0, True)

    y = samples.time_ns.astype(float)
    x = np.arange(len(y), dtype=float)
    fit = stats.linregress(x, y)
    r = float(fit.rvalue) if np.isfinite(fit.rvalue) else 0.0
    return TrendResult(float(fit.slope), r, abs(r) < STABILITY_THRESHOLD)
