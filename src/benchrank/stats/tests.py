"""Hypothesis tests on sample sets (Welch t-test, Holm correction, Welch ANOVA)."""

from __future__ import annotations

import logging
import math
from typing import NamedTuple, Sequence, Union

import numpy as np
from scipy import stats
from statsmodels.stats.multitest import multipletests

from benchrank.errors import DegenerateVariance, InsufficientGroups, InsufficientSamples
from benchrank.samples import SampleAggregate
from benchrank.stats.effects import GroupStats, group_stats

logger = logging.getLogger(__name__)

GroupLike = Union[SampleAggregate, GroupStats]


class WelchTTestResult(NamedTuple):
    """Welch's t-test outcome."""

    statistic: float
    df: float
    p_value: float


class WelchAnovaResult(NamedTuple):
    """Welch's one-way ANOVA outcome."""

    statistic: float
    df1: float
    df2: float
    p_value: float


def _as_stats(group: GroupLike) -> GroupStats:
    if isinstance(group, SampleAggregate):
        return group_stats(group)
    return group


def welch_ttest(a: GroupLike, b: GroupLike) -> WelchTTestResult:
    """Perform Welch's t-test (unequal variances) from group summaries.

    Args:
        a: First group (count >= 2)
        b: Second group (count >= 2)

    Returns:
        WelchTTestResult with Satterthwaite degrees of freedom and a
        two-sided p-value

    Notes:
        When both variances are zero the standard error vanishes: t is 0 and
        p is 1 for equal means, otherwise t is +/-inf and p is 0. The
        degrees of freedom then fall back to n1 + n2 - 2.
    """
    a, b = _as_stats(a), _as_stats(b)
    if a.count < 2 or b.count < 2:
        raise InsufficientSamples(
            f"Welch t-test needs at least 2 samples per group, got {a.count} and {b.count}"
        )

    va = a.variance / a.count
    vb = b.variance / b.count
    se2 = va + vb
    diff = a.mean - b.mean

    denom = va * va / (a.count - 1) + vb * vb / (b.count - 1)
    df = se2 * se2 / denom if denom > 0 else float(a.count + b.count - 2)

    if se2 <= 0:
        logger.warning("Zero standard error in Welch t-test (means %.6g and %.6g)", a.mean, b.mean)
        if diff == 0:
            return WelchTTestResult(0.0, df, 1.0)
        return WelchTTestResult(math.copysign(math.inf, diff), df, 0.0)

    t_stat = diff / math.sqrt(se2)
    p_val = 2.0 * stats.t.sf(abs(t_stat), df)
    return WelchTTestResult(float(t_stat), float(df), float(min(1.0, p_val)))


def holm_adjust(pvals: Sequence[float]) -> np.ndarray:
    """Holm step-down adjustment with statsmodels multipletests.

    The correction is always Holm; pairwise comparisons have no other method.
    Non-finite p-values are left as NaN and excluded from the family.
    """
    pvals = np.asarray(pvals, dtype=float)
    p_adj = np.full_like(pvals, np.nan, dtype=float)
    mask = np.isfinite(pvals)
    if mask.any():
        _, adj, _, _ = multipletests(pvals[mask], method="holm")
        p_adj[mask] = adj
    return p_adj


def welch_anova(groups: Sequence[GroupLike]) -> WelchAnovaResult:
    """Perform Welch's one-way ANOVA (unequal variances).

    Args:
        groups: Two or more groups, each with count >= 2 and positive variance

    Returns:
        WelchAnovaResult with F statistic, df1, df2 and p-value

    Raises:
        InsufficientGroups: Fewer than 2 groups
        InsufficientSamples: A group has fewer than 2 observations
        DegenerateVariance: A group has zero or non-finite variance
    """
    k = len(groups)
    if k < 2:
        raise InsufficientGroups(f"Welch ANOVA needs at least 2 groups, got {k}")

    summaries = [_as_stats(g) for g in groups]
    for i, g in enumerate(summaries):
        if g.count < 2:
            raise InsufficientSamples(f"Group {i} has {g.count} sample(s); need at least 2")
        if not np.isfinite(g.variance) or g.variance <= 0:
            raise DegenerateVariance(f"Group {i} has non-positive variance {g.variance}")

    n = np.array([g.count for g in summaries], dtype=float)
    m = np.array([g.mean for g in summaries], dtype=float)
    v = np.array([g.variance for g in summaries], dtype=float)

    w = n / v
    w_sum = w.sum()
    grand_mean = (w * m).sum() / w_sum

    numerator = (w * (m - grand_mean) ** 2).sum() / (k - 1)
    lam = ((1.0 - w / w_sum) ** 2 / (n - 1)).sum()
    denominator = 1.0 + 2.0 * (k - 2) * lam / (k * k - 1)

    f_stat = numerator / denominator
    df1 = float(k - 1)
    df2 = max(1.0, (k * k - 1) / (3.0 * lam))
    p_val = stats.f.sf(f_stat, df1, df2)

    return WelchAnovaResult(float(f_stat), df1, float(df2), float(p_val))
