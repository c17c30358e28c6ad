"""Comparison of benchmark sample sets.

The comparison method depends on how many sample sets are given:

- 1: single-group summary, no pairwise comparisons
- 2 to ``CompareConfig.max_pairwise_groups`` (default 5): Welch's t-test on
  every pair with Holm correction, grouped by compact letter display
- more: Scott-Knott ESD clustering, with clusters compared pairwise

Public API:
-----------
from benchrank.compare import compare

result = compare([fast, slow])
result.pair("fast", "slow").significant
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Sequence

from benchrank.compare.models import (
    METHODS,
    ComparisonGroup,
    ComparisonKind,
    ComparisonMethod,
    ComparisonResult,
    PairwiseComparison,
)
from benchrank.compare.pairwise import pairwise_welch
from benchrank.compare.skesd import scott_knott_esd
from benchrank.config import CompareConfig
from benchrank.errors import InvalidArgument
from benchrank.samples import SampleAggregate

logger = logging.getLogger(__name__)


def single_sample(samples: Sequence[SampleAggregate], config: Optional[CompareConfig] = None) -> ComparisonResult:
    """Wrap one sample set as a single group without comparisons."""
    s = samples[0]
    group = ComparisonGroup(rank=1, names=(s.name,), members=(0,), mean=s.mean(), count=s.count)
    return ComparisonResult(method=METHODS[ComparisonKind.SINGLE], pairs=(), groups=(group,))


_BUILDERS: Dict[ComparisonKind, Callable[..., ComparisonResult]] = {
    ComparisonKind.SINGLE: single_sample,
    ComparisonKind.PAIRWISE: pairwise_welch,
    ComparisonKind.CLUSTERED: scott_knott_esd,
}


def select_method(n_samples: int, config: Optional[CompareConfig] = None) -> ComparisonKind:
    """Choose the comparison method for a number of sample sets."""
    config = config or CompareConfig()
    if n_samples < 1:
        raise InvalidArgument("At least one sample set is required")
    if n_samples == 1:
        return ComparisonKind.SINGLE
    if n_samples <= config.max_pairwise_groups:
        return ComparisonKind.PAIRWISE
    return ComparisonKind.CLUSTERED


def compare(samples: Sequence[SampleAggregate], config: Optional[CompareConfig] = None) -> ComparisonResult:
    """Compare named sample sets.

    Args:
        samples: Ordered, non-empty list of sample sets with unique names
        config: Comparison thresholds

    Returns:
        ComparisonResult

    Raises:
        InvalidArgument: Empty input, or a missing or duplicate name
    """
    config = config or CompareConfig()
    samples = list(samples)
    kind = select_method(len(samples), config)

    seen = set()
    for i, s in enumerate(samples):
        if not s.name:
            raise InvalidArgument(f"Sample set at position {i} has no name")
        if s.name in seen:
            raise InvalidArgument(f"Duplicate sample set name {s.name!r}")
        seen.add(s.name)

    logger.debug("Comparing %d sample set(s) with %s", len(samples), kind.value)
    return _BUILDERS[kind](samples, config)


__all__ = [
    "ComparisonGroup",
    "ComparisonKind",
    "ComparisonMethod",
    "ComparisonResult",
    "PairwiseComparison",
    "compare",
    "pairwise_welch",
    "scott_knott_esd",
    "select_method",
    "single_sample",
]
