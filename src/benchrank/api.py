"""High-level analysis entry point."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from benchrank.compare import ComparisonResult, compare
from benchrank.config import CompareConfig, SummaryConfig
from benchrank.errors import InvalidArgument
from benchrank.samples import SampleAggregate
from benchrank.stats.summary import SampleSummary, describe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BenchmarkAnalysis:
    """Per-set summaries (in input order) and their comparison."""

    summaries: Tuple[SampleSummary, ...]
    comparison: ComparisonResult

    def summary(self, name: str) -> Optional[SampleSummary]:
        for s in self.summaries:
            if s.name == name:
                return s
        return None


def analyze(
    samples: Sequence[SampleAggregate],
    config: Optional[CompareConfig] = None,
    summary_config: Optional[SummaryConfig] = None,
) -> BenchmarkAnalysis:
    """
    Summarize and compare benchmark sample sets.

    Parameters
    ----------
    samples : Sequence[SampleAggregate]
        Named sample sets, in report order
    config : CompareConfig, optional
        Comparison thresholds
    summary_config : SummaryConfig, optional
        Outlier method and quality thresholds

    Returns
    -------
    BenchmarkAnalysis
    """
    samples = list(samples)
    if not samples:
        raise InvalidArgument("At least one sample set is required")

    summaries = tuple(describe(s, summary_config) for s in samples)
    comparison = compare(samples, config)
    logger.info(f"Analyzed {len(samples)} sample set(s) using {comparison.method.name}")
    return BenchmarkAnalysis(summaries=summaries, comparison=comparison)
