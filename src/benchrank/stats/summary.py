"""Descriptive summary of a sample set."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import numpy as np

from benchrank.config import QualityThresholds, SummaryConfig
from benchrank.errors import InsufficientData
from benchrank.samples import SampleAggregate
from benchrank.stats.outliers import detect_outliers
from benchrank.stats.quantile import z_value


MIN_SAMPLE_SIZE = 30
MAX_RESAMPLE_SIZE = 5000
MAX_RESAMPLE_FACTOR = 20
MIN_RESAMPLE_INCREMENT = 10
STATS_EPSILON = 1e-15

QUALITY_LABELS = ("excellent", "good", "acceptable", "poor", "unknown")


@dataclass(frozen=True)
class MemoryStats:
    """Memory behaviour of a sample set (all values in KB).

    Attributes:
        allocation_rate: Mean allocated KB per operation
        max_allocation: Largest single-operation allocation
        peak_memory: Largest memory-after reading
        uncollected: Memory left above the baseline after the last operation
        average_increment: ``uncollected`` spread over all operations
        gc_impact: Correlation between allocation and elapsed time
        memory_efficiency: Inverse of the allocation rate (0 when nothing is allocated)
    """

    allocation_rate: float
    max_allocation: float
    peak_memory: float
    uncollected: float
    average_increment: float
    gc_impact: float
    memory_efficiency: float


@dataclass(frozen=True)
class SampleSummary:
    """Read-only statistics of one sample set. Undefined values are NaN."""

    name: Optional[str]
    count: int
    min: float
    max: float
    mean: float
    variance: float
    stddev: float
    stderr: float
    cv: float
    p25: float
    p50: float
    p75: float
    p95: float
    p99: float
    iqr: float
    throughput: float
    ci_lower: float
    ci_upper: float
    confidence_level: float
    rciw: float
    target_rciw: float
    quality: str
    resample_size: Optional[int]
    outliers: int
    outlier_percentage: float
    memory: MemoryStats

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to a dictionary (memory fields prefixed with ``memory_``)."""
        data = asdict(self)
        memory = data.pop("memory")
        data.update({f"memory_{k}": v for k, v in memory.items()})
        return data


def classify_quality(rciw: float, target_rciw: float, thresholds: Optional[QualityThresholds] = None) -> str:
    """Map a realized RCIW onto a quality label.

    Args:
        rciw: Realized relative CI width (%)
        target_rciw: Target relative CI width (%)
        thresholds: Multiples of the target bounding good and acceptable

    Returns:
        excellent, good, acceptable, poor, or unknown when rciw is NaN
    """
    thresholds = thresholds or QualityThresholds()
    if rciw != rciw:
        return "unknown"
    if rciw <= target_rciw:
        return "excellent"
    if rciw <= thresholds.good * target_rciw:
        return "good"
    if rciw <= thresholds.acceptable * target_rciw:
        return "acceptable"
    return "poor"


def recommend_resample_size(samples: SampleAggregate) -> Optional[int]:
    """Estimate how many observations would reach the target RCIW.

    Args:
        samples: Sample set

    Returns:
        Recommended observation count, or None when the target is already met
        or cannot be estimated (confidence level of 100%)
    """
    n = samples.count
    mean = samples.mean()
    stderr = samples.stderr()
    if n < 2 or math.isnan(mean) or math.isnan(stderr):
        return MIN_SAMPLE_SIZE

    if stderr <= STATS_EPSILON:
        return None

    z = z_value(samples.cl / 100.0)
    if not math.isfinite(z):
        return None
    # RCIW = 2 * margin / mean * 100
    target_margin = samples.rciw * abs(mean) / 200.0
    if z * stderr <= target_margin:
        return None

    raw_n = (z * samples.stddev() / target_margin) ** 2
    ratio = raw_n / n
    # Progressive dampening by growth ratio.
    if ratio <= 2.0:
        scaled_n = raw_n
    elif ratio <= 5.0:
        scaled_n = n * (1 + (ratio - 1) * 0.8)
    elif ratio <= 10.0:
        scaled_n = n * (1 + (ratio - 1) * 0.5)
    else:
        scaled_n = n * (1 + math.log(ratio) * 2)

    estimated = max(math.ceil(scaled_n), n + MIN_RESAMPLE_INCREMENT)
    return int(min(estimated, n * MAX_RESAMPLE_FACTOR, MAX_RESAMPLE_SIZE))


def memory_stats(samples: SampleAggregate) -> MemoryStats:
    """Compute allocation and retention statistics; NaN fields when empty."""
    n = samples.count
    if n == 0:
        nan = math.nan
        return MemoryStats(nan, nan, nan, nan, nan, nan, nan)

    allocated = samples.allocated_kb.astype(float)
    times = samples.time_ns.astype(float)
    after = samples.after_kb

    rate = float(allocated.mean())
    uncollected = float(max(0, int(after[-1]) - samples.base_kb))

    dt = times - times.mean()
    da = allocated - rate
    den = float(np.sum(dt * dt) * np.sum(da * da))
    gc_impact = float(np.sum(dt * da) / math.sqrt(den)) if den > 0 else 0.0

    return MemoryStats(
        allocation_rate=rate,
        max_allocation=float(allocated.max()),
        peak_memory=float(after.max()),
        uncollected=uncollected,
        average_increment=uncollected / n,
        gc_impact=gc_impact,
        memory_efficiency=1.0 / rate if rate > 0 else 0.0,
    )


def _ratio(num: float, den: float) -> float:
    if math.isnan(num) or math.isnan(den) or den == 0:
        return math.nan
    return num / den


def describe(samples: SampleAggregate, config: Optional[SummaryConfig] = None) -> SampleSummary:
    """Summarize a sample set.

    Never raises for sparse data: fields that the observations cannot
    support are NaN and the outlier count is 0 below four observations.

    Args:
        samples: Sample set to summarize (not modified)
        config: Outlier method and quality thresholds

    Returns:
        SampleSummary
    """
    config = config or SummaryConfig()
    n = samples.count
    mean = samples.mean()
    stderr = samples.stderr()
    nan = math.nan

    ci_lower = ci_upper = rciw = nan
    if not math.isnan(stderr):
        if stderr <= STATS_EPSILON:
            ci_lower = ci_upper = mean
            rciw = 0.0
        else:
            half_width = z_value(samples.cl / 100.0) * stderr
            ci_lower, ci_upper = mean - half_width, mean + half_width
            if abs(mean) > STATS_EPSILON:
                rciw = 100.0 * (ci_upper - ci_lower) / abs(mean)

    try:
        n_outliers = len(detect_outliers(samples, config.outlier_method))
    except InsufficientData:
        n_outliers = 0

    p25 = samples.percentile(25)
    p75 = samples.percentile(75)
    throughput = 1e9 / mean if n > 0 and mean > 0 else nan

    return SampleSummary(
        name=samples.name,
        count=n,
        min=samples.min(),
        max=samples.max(),
        mean=mean,
        variance=samples.variance(),
        stddev=samples.stddev(),
        stderr=stderr,
        cv=_ratio(samples.stddev(), mean),
        p25=p25,
        p50=samples.percentile(50),
        p75=p75,
        p95=samples.percentile(95),
        p99=samples.percentile(99),
        iqr=p75 - p25,
        throughput=throughput,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        confidence_level=samples.cl,
        rciw=rciw,
        target_rciw=samples.rciw,
        quality=classify_quality(rciw, samples.rciw, config.quality),
        resample_size=recommend_resample_size(samples),
        outliers=n_outliers,
        outlier_percentage=100.0 * n_outliers / n if n > 0 else 0.0,
        memory=memory_stats(samples),
    )
