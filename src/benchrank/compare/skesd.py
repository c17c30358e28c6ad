"""Scott-Knott ESD clustering of sample sets."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from benchrank.compare.models import METHODS, ComparisonGroup, ComparisonKind, ComparisonResult
from benchrank.compare.pairwise import welch_pairs
from benchrank.config import CompareConfig
from benchrank.errors import DegenerateVariance, InsufficientGroups, InsufficientSamples
from benchrank.samples import SampleAggregate
from benchrank.stats.effects import GroupStats, cohen_d, group_stats, pool
from benchrank.stats.tests import welch_anova

logger = logging.getLogger(__name__)


def _validate(samples: Sequence[SampleAggregate]) -> List[GroupStats]:
    summaries = []
    for s in samples:
        g = group_stats(s)
        if g.count < 2:
            raise InsufficientSamples(f"Sample set {s.name!r} has {g.count} observation(s); need at least 2")
        if not np.isfinite(g.variance) or g.variance <= 0:
            raise DegenerateVariance(f"Sample set {s.name!r} has non-positive variance {g.variance}")
        summaries.append(g)
    return summaries


def _best_split(stats: Sequence[GroupStats]) -> int:
    """Split point maximizing the between-group sum of squares.

    Returns the index of the first element of the right-hand side; ties
    (including all-zero sums of squares) resolve to the leftmost split.
    """
    overall = pool(stats).mean
    best, best_ss = 1, -np.inf
    for split in range(1, len(stats)):
        left, right = pool(stats[:split]), pool(stats[split:])
        ss = left.count * (left.mean - overall) ** 2 + right.count * (right.mean - overall) ** 2
        if ss > best_ss:
            best, best_ss = split, ss
    return best


def _partition(
    stats: Sequence[GroupStats],
    order: Sequence[int],
    config: CompareConfig,
    clusters: List[List[int]],
) -> None:
    if len(order) == 1:
        clusters.append(list(order))
        return

    ordered = [stats[i] for i in order]
    split = _best_split(ordered)
    left, right = pool(ordered[:split]), pool(ordered[split:])

    anova = welch_anova([left, right])
    d = cohen_d(left, right)
    if anova.p_value < config.alpha and d >= config.effect_threshold:
        logger.debug("Split %s | %s (p=%.3g, d=%.3f)", order[:split], order[split:], anova.p_value, d)
        _partition(stats, order[:split], config, clusters)
        _partition(stats, order[split:], config, clusters)
    else:
        clusters.append(list(order))


def scott_knott_esd(
    samples: Sequence[SampleAggregate],
    config: Optional[CompareConfig] = None,
) -> ComparisonResult:
    """Cluster sample sets by significant, non-negligible mean differences.

    Sample sets are sorted by mean and split recursively at the point that
    maximizes the between-group sum of squares. A split is kept only when
    Welch's ANOVA on the two sides gives p < alpha and Cohen's d between
    them is at least ``config.effect_threshold``. Clusters are then compared
    pairwise on their merged observations.

    Args:
        samples: One or more named sample sets; with two or more, each needs
            count >= 2 and positive variance
        config: Significance and effect-size thresholds

    Returns:
        ComparisonResult whose groups are the clusters ranked by mean and
        whose pairs are named ``Cluster <id>``

    Raises:
        InsufficientGroups: No sample sets
        InsufficientSamples: A sample set has fewer than 2 observations
        DegenerateVariance: A sample set has zero variance
    """
    config = config or CompareConfig()
    if len(samples) == 0:
        raise InsufficientGroups("Scott-Knott ESD needs at least 1 sample set")

    stats = _validate(samples) if len(samples) > 1 else [group_stats(samples[0])]
    order = sorted(range(len(samples)), key=lambda i: stats[i].mean)
    partitions: List[List[int]] = []
    _partition(stats, order, config, partitions)

    pooled = [pool(stats[i] for i in members) for members in partitions]
    ranked = sorted(zip(partitions, pooled), key=lambda item: item[1].mean)

    groups = []
    previous: Optional[GroupStats] = None
    for rank, (members, combined) in enumerate(ranked, start=1):
        d = 0.0 if previous is None else float(cohen_d(combined, previous))
        members = sorted(members)
        groups.append(
            ComparisonGroup(
                rank=rank,
                names=tuple(samples[i].name for i in members),
                members=tuple(members),
                mean=float(combined.mean),
                count=combined.count,
                id=rank,
                cohen_d=d,
            )
        )
        previous = combined

    pairs = ()
    if len(groups) > 1:
        names = [f"Cluster {g.id}" for g in groups]
        aggregates = [
            samples[g.members[0]] if len(g.members) == 1
            else SampleAggregate.merge(name, [samples[i] for i in g.members])
            for name, g in zip(names, groups)
        ]
        pairs = welch_pairs(aggregates, names, config.alpha)

    logger.debug("Scott-Knott ESD formed %d cluster(s) from %d sample sets", len(groups), len(samples))
    return ComparisonResult(method=METHODS[ComparisonKind.CLUSTERED], pairs=pairs, groups=tuple(groups))
