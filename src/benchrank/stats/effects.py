"""Effect sizes and pooled group statistics."""

from __future__ import annotations

from typing import Iterable, NamedTuple

import numpy as np

from benchrank.samples import SampleAggregate


class GroupStats(NamedTuple):
    """Count, mean and unbiased variance of one group."""

    count: int
    mean: float
    variance: float


def group_stats(samples: SampleAggregate) -> GroupStats:
    """Summarize a sample aggregate as GroupStats."""
    return GroupStats(samples.count, samples.mean(), samples.variance())


def pool(groups: Iterable[GroupStats]) -> GroupStats:
    """Combine groups as if their observations were concatenated.

    Args:
        groups: Groups with count >= 1

    Returns:
        GroupStats of the union (variance NaN when the union has < 2 observations)
    """
    groups = [g for g in groups if g.count > 0]
    n = sum(g.count for g in groups)
    if n == 0:
        return GroupStats(0, np.nan, np.nan)

    mean = sum(g.count * g.mean for g in groups) / n
    if n < 2:
        return GroupStats(n, mean, np.nan)

    # Within-group plus between-group sums of squares.
    ss = 0.0
    for g in groups:
        within = (g.count - 1) * g.variance if g.count > 1 else 0.0
        ss += within + g.count * (g.mean - mean) ** 2
    return GroupStats(n, mean, ss / (n - 1))


def cohen_d(a: GroupStats, b: GroupStats) -> float:
    """Calculate Cohen's d between two groups.

    Args:
        a: First group
        b: Second group

    Returns:
        |mean_a - mean_b| / pooled standard deviation

    Notes:
        Returns NaN if either group has fewer than 2 observations, and 0 if
        the pooled standard deviation is zero
    """
    if a.count < 2 or b.count < 2:
        return np.nan

    sp2 = ((a.count - 1) * a.variance + (b.count - 1) * b.variance) / (a.count + b.count - 2)
    if not np.isfinite(sp2):
        return np.nan
    if sp2 <= 0:
        return 0.0

    return abs(a.mean - b.mean) / np.sqrt(sp2)
