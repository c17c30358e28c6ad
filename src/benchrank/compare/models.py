"""Immutable comparison result types."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple


class ComparisonKind(str, Enum):
    """How a set of samples was compared."""

    SINGLE = "single-sample"
    PAIRWISE = "welch-t-test-holm-correction"
    CLUSTERED = "scott-knott-esd"


@dataclass(frozen=True)
class ComparisonMethod:
    """Descriptor of the comparison algorithm."""

    kind: ComparisonKind
    name: str
    description: str
    clustering: str

    @property
    def algorithm(self) -> str:
        return self.kind.value


METHODS: Mapping[ComparisonKind, ComparisonMethod] = MappingProxyType({
    ComparisonKind.SINGLE: ComparisonMethod(
        kind=ComparisonKind.SINGLE,
        name="Single sample summary",
        description="Only one sample provided; pairwise comparisons are unavailable",
        clustering="single group (no statistical comparison)",
    ),
    ComparisonKind.PAIRWISE: ComparisonMethod(
        kind=ComparisonKind.PAIRWISE,
        name="Welch's t-test with Holm correction",
        description=(
            "Each sample group is compared against every other sample group with "
            "adjusted p-values to control family-wise error rate"
        ),
        clustering="compact letter display based on statistical significance",
    ),
    ComparisonKind.CLUSTERED: ComparisonMethod(
        kind=ComparisonKind.CLUSTERED,
        name="Scott-Knott ESD (Effect Size Difference) clustering",
        description=(
            "Statistically similar groups are identified to avoid the multiple "
            "comparison problem with large numbers of sample groups"
        ),
        clustering="hierarchical clustering based on effect size differences",
    ),
})


@dataclass(frozen=True)
class PairwiseComparison:
    """Welch t-test between two sample sets (or two clusters).

    ``speedup`` is mean1 / mean2 and ``relative_difference`` is
    |mean1 - mean2| / mean2 in percent; both are 0 when mean2 <= 0.
    ``significant`` uses the Holm-adjusted p-value.
    """

    name1: str
    name2: str
    mean1: float
    mean2: float
    speedup: float
    difference: float
    relative_difference: float
    t_statistic: float
    df: float
    p_value: float
    p_adjusted: float
    significant: bool
    significance_level: Optional[str]
    sample_sizes: Tuple[int, int]

    @property
    def names(self) -> FrozenSet[str]:
        return frozenset((self.name1, self.name2))


@dataclass(frozen=True)
class ComparisonGroup:
    """Sample sets that could not be told apart.

    Attributes:
        rank: 1-based position, ascending by mean
        names: Member sample set names
        members: 0-based indices of the members in the compared list
        mean: Mean over all member observations
        count: Number of member observations
        id: Cluster identifier (clustering only)
        cohen_d: Effect size against the next lower-ranked cluster (clustering only)
    """

    rank: int
    names: Tuple[str, ...]
    members: Tuple[int, ...]
    mean: float
    count: int
    id: Optional[int] = None
    cohen_d: Optional[float] = None


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing one or more sample sets.

    Pairs are looked up in either order with ``pair(a, b)``.
    """

    method: ComparisonMethod
    pairs: Tuple[PairwiseComparison, ...]
    groups: Tuple[ComparisonGroup, ...]
    _index: Mapping[FrozenSet[str], int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        index = {p.names: i for i, p in enumerate(self.pairs)}
        object.__setattr__(self, "_index", MappingProxyType(index))

    @property
    def kind(self) -> ComparisonKind:
        return self.method.kind

    def pair(self, name1: str, name2: str) -> Optional[PairwiseComparison]:
        """Return the comparison between two names, regardless of order."""
        i = self._index.get(frozenset((name1, name2)))
        return None if i is None else self.pairs[i]

    def group_of(self, name: str) -> Optional[ComparisonGroup]:
        """Return the group containing a sample set name."""
        for group in self.groups:
            if name in group.names:
                return group
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation (NaN and infinities become None)."""

        def clean(value):
            if isinstance(value, float) and not math.isfinite(value):
                return None
            if isinstance(value, (list, tuple)):
                return [clean(v) for v in value]
            return value

        return {
            "method": {
                "name": self.method.name,
                "algorithm": self.method.algorithm,
                "description": self.method.description,
                "clustering": self.method.clustering,
            },
            "pairs": [{k: clean(v) for k, v in asdict(p).items()} for p in self.pairs],
            "groups": [{k: clean(v) for k, v in asdict(g).items()} for g in self.groups],
        }
