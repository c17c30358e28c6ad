"""Histogram of recorded times."""

from __future__ import annotations

from typing import NamedTuple, Tuple

import numpy as np

from benchrank.errors import InsufficientData, InvalidArgument
from benchrank.samples import SampleAggregate

DEFAULT_BINS = 10


class Distribution(NamedTuple):
    """Equal-width histogram; ``bin_edges`` has one more entry than ``frequencies``."""

    bin_edges: Tuple[float, ...]
    frequencies: Tuple[int, ...]


def distribution(samples: SampleAggregate, bins: int = DEFAULT_BINS) -> Distribution:
    """Bin the recorded times between their minimum and maximum.

    Args:
        samples: Sample set with at least one observation
        bins: Number of bins (> 0)

    Returns:
        Distribution. When all times are equal every observation lands in
        the first bin.
    """
    if bins <= 0:
        raise InvalidArgument(f"bins must be positive, got {bins}")
    if samples.count == 0:
        raise InsufficientData("Cannot build a distribution without observations")

    times = samples.time_ns.astype(float)
    lo, hi = float(times.min()), float(times.max())
    if hi - lo <= 0:
        edges = lo + np.arange(bins + 1) * np.finfo(float).eps * max(1.0, abs(lo))
        counts = np.zeros(bins, dtype=int)
        counts[0] = samples.count
    else:
        counts, edges = np.histogram(times, bins=bins, range=(lo, hi))

    return Distribution(tuple(float(e) for e in edges), tuple(int(c) for c in counts))
