"""Configuration dataclasses for summaries and comparisons."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict

from benchrank.errors import InvalidArgument

OUTLIER_METHODS = ("tukey", "mad")


@dataclass(frozen=True)
class QualityThresholds:
    """Multiples of the target RCIW that bound each quality label.

    A realized RCIW at or below the target is ``excellent``; at or below
    ``good`` times the target is ``good``; at or below ``acceptable`` times
    the target is ``acceptable``; anything wider is ``poor``.
    """

    good: float = 2.0
    acceptable: float = 4.0

    def __post_init__(self):
        """Validate thresholds."""
        if not (1.0 < self.good < self.acceptable):
            raise InvalidArgument(
                f"Quality multiples must satisfy 1 < good < acceptable, got good={self.good}, "
                f"acceptable={self.acceptable}"
            )


@dataclass
class SummaryConfig:
    """Configuration for descriptive summaries.

    Attributes:
        outlier_method: Outlier rule used for the outlier count (tukey or mad)
        quality: Quality label thresholds
    """

    outlier_method: str = "tukey"
    quality: QualityThresholds = field(default_factory=QualityThresholds)

    def __post_init__(self):
        """Validate configuration."""
        if self.outlier_method not in OUTLIER_METHODS:
            raise InvalidArgument(
                f"outlier_method must be one of {list(OUTLIER_METHODS)}, got {self.outlier_method}"
            )


@dataclass
class CompareConfig:
    """Configuration for sample set comparison.

    Attributes:
        alpha: Significance threshold for adjusted p-values (default: 0.05)
        effect_threshold: Minimum Cohen's d for accepting a cluster split (default: 0.2)
        max_pairwise_groups: Largest number of sets compared pairwise before
            switching to clustering (default: 5)
    """

    alpha: float = 0.05
    effect_threshold: float = 0.2
    max_pairwise_groups: int = 5

    def __post_init__(self):
        """Validate configuration."""
        if self.alpha <= 0 or self.alpha >= 1:
            raise InvalidArgument(f"Alpha must be in (0, 1), got {self.alpha}")

        if self.effect_threshold < 0:
            raise InvalidArgument(f"effect_threshold must be >= 0, got {self.effect_threshold}")

        if self.max_pairwise_groups < 2:
            raise InvalidArgument(f"max_pairwise_groups must be >= 2, got {self.max_pairwise_groups}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)
