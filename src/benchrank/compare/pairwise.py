"""All-pairs Welch t-tests with Holm correction and compact-letter grouping."""

from __future__ import annotations

import itertools
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from benchrank.compare.models import (
    METHODS,
    ComparisonGroup,
    ComparisonKind,
    ComparisonResult,
    PairwiseComparison,
)
from benchrank.config import CompareConfig
from benchrank.errors import InsufficientGroups, InsufficientSamples
from benchrank.samples import SampleAggregate
from benchrank.stats.effects import group_stats, pool
from benchrank.stats.tests import holm_adjust, welch_ttest

logger = logging.getLogger(__name__)

SIGNIFICANCE_LEVELS = ((0.001, "p<0.001"), (0.01, "p<0.01"), (0.05, "p<0.05"))


def significance_level(p_value: float, alpha: float = 0.05) -> Optional[str]:
    """Bucket a p-value; None when it is not below alpha or 0.05."""
    if not p_value < alpha:
        return None
    for cutoff, label in SIGNIFICANCE_LEVELS:
        if p_value < cutoff:
            return label
    return None


def _speedup(mean1: float, mean2: float) -> Tuple[float, float]:
    if mean2 > 0:
        return mean1 / mean2, abs(mean1 - mean2) / mean2 * 100.0
    return 0.0, 0.0


def welch_pairs(
    samples: Sequence[SampleAggregate],
    names: Sequence[str],
    alpha: float = 0.05,
) -> Tuple[PairwiseComparison, ...]:
    """Compare every unordered pair of sample sets.

    Args:
        samples: Two or more sample sets, each with count >= 2
        names: Display name per sample set
        alpha: Significance threshold for Holm-adjusted p-values

    Returns:
        One PairwiseComparison per pair, in (i, j) order with i < j

    Raises:
        InsufficientGroups: Fewer than 2 sample sets
        InsufficientSamples: A sample set has fewer than 2 observations
    """
    if len(samples) < 2:
        raise InsufficientGroups(f"Pairwise comparison needs at least 2 sample sets, got {len(samples)}")
    for name, s in zip(names, samples):
        if s.count < 2:
            raise InsufficientSamples(f"Sample set {name!r} has {s.count} observation(s); need at least 2")

    index_pairs = list(itertools.combinations(range(len(samples)), 2))
    tests = [welch_ttest(samples[i], samples[j]) for i, j in index_pairs]
    p_adj = holm_adjust([t.p_value for t in tests])

    pairs = []
    for (i, j), test, adj in zip(index_pairs, tests, p_adj):
        mean1, mean2 = samples[i].mean(), samples[j].mean()
        speedup, rel_diff = _speedup(mean1, mean2)
        adj = float(adj)
        pairs.append(
            PairwiseComparison(
                name1=names[i],
                name2=names[j],
                mean1=mean1,
                mean2=mean2,
                speedup=speedup,
                difference=mean1 - mean2,
                relative_difference=rel_diff,
                t_statistic=test.statistic,
                df=test.df,
                p_value=test.p_value,
                p_adjusted=adj,
                significant=bool(adj < alpha),
                significance_level=significance_level(adj, alpha),
                sample_sizes=(samples[i].count, samples[j].count),
            )
        )
    return tuple(pairs)


def _components(similar: np.ndarray) -> List[List[int]]:
    n = similar.shape[0]
    visited = np.zeros(n, dtype=bool)
    components = []
    for start in range(n):
        if visited[start]:
            continue
        component = []
        stack = [start]
        while stack:
            node = stack.pop()
            if visited[node]:
                continue
            visited[node] = True
            component.append(node)
            stack.extend(int(j) for j in np.flatnonzero(similar[node] & ~visited))
        components.append(sorted(component))
    return components


def compact_letter_groups(
    samples: Sequence[SampleAggregate],
    names: Sequence[str],
    pairs: Sequence[PairwiseComparison],
) -> Tuple[ComparisonGroup, ...]:
    """Group sample sets connected by non-significant comparisons.

    Sample sets form the nodes of a graph with an edge wherever the
    adjusted p-value is not significant; each connected component becomes
    a group. Groups are ranked by their pooled mean, ascending.
    """
    n = len(samples)
    position = {name: i for i, name in enumerate(names)}
    similar = np.eye(n, dtype=bool)
    for p in pairs:
        i, j = position[p.name1], position[p.name2]
        similar[i, j] = similar[j, i] = not p.significant

    ranked = []
    for members in _components(similar):
        pooled = pool(group_stats(samples[i]) for i in members)
        ranked.append((pooled.mean, members, pooled.count))
    ranked.sort(key=lambda item: item[0])

    return tuple(
        ComparisonGroup(
            rank=rank,
            names=tuple(names[i] for i in members),
            members=tuple(members),
            mean=float(mean),
            count=count,
        )
        for rank, (mean, members, count) in enumerate(ranked, start=1)
    )


def pairwise_welch(
    samples: Sequence[SampleAggregate],
    config: Optional[CompareConfig] = None,
) -> ComparisonResult:
    """Compare sample sets pairwise and group the indistinguishable ones.

    Args:
        samples: Two or more named sample sets
        config: Significance threshold

    Returns:
        ComparisonResult with one pair per unordered pair of sample sets
    """
    config = config or CompareConfig()
    names = [s.name for s in samples]
    pairs = welch_pairs(samples, names, config.alpha)
    groups = compact_letter_groups(samples, names, pairs)
    logger.debug("Pairwise comparison of %d sample sets produced %d group(s)", len(samples), len(groups))
    return ComparisonResult(method=METHODS[ComparisonKind.PAIRWISE], pairs=pairs, groups=groups)
