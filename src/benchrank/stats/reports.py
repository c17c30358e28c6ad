"""Build tabular reports of summaries and comparisons."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Sequence

import pandas as pd

from benchrank import __version__
from benchrank.compare.models import ComparisonResult
from benchrank.config import CompareConfig
from benchrank.stats.summary import SampleSummary

SUMMARY_COLUMNS = [
    "name", "count", "mean", "stddev", "stderr", "cv", "min", "p50", "p95", "p99", "max",
    "throughput", "ci_lower", "ci_upper", "rciw", "quality", "outliers", "outlier_percentage",
]

MEMORY_COLUMNS = [
    "name", "memory_max_allocation", "memory_allocation_rate", "memory_peak_memory",
    "memory_uncollected", "memory_average_increment",
]

PAIR_COLUMNS = [
    "name1", "name2", "mean1", "mean2", "speedup", "difference", "relative_difference",
    "t_statistic", "df", "p_value", "p_adjusted", "significant", "significance_level",
]

GROUP_COLUMNS = ["rank", "names", "mean", "count", "id", "cohen_d"]


def build_run_manifest(result: ComparisonResult, config: CompareConfig, n_samples: int) -> pd.DataFrame:
    """Build run manifest table.

    Returns:
        DataFrame with metadata about the comparison run
    """
    rows = [
        {"parameter": "benchrank_version", "value": __version__},
        {"parameter": "timestamp", "value": datetime.now().strftime("%Y-%m-%d %H:%M:%S")},
        {"parameter": "n_sample_sets", "value": n_samples},
        {"parameter": "method", "value": result.method.name},
        {"parameter": "algorithm", "value": result.method.algorithm},
        {"parameter": "clustering", "value": result.method.clustering},
    ]
    rows.extend({"parameter": k, "value": v} for k, v in config.to_dict().items())
    return pd.DataFrame(rows, columns=["parameter", "value"])


def build_summary_table(summaries: Sequence[SampleSummary]) -> pd.DataFrame:
    """One row of descriptive statistics per sample set."""
    df = pd.DataFrame([s.to_dict() for s in summaries])
    existing_cols = [c for c in SUMMARY_COLUMNS if c in df.columns]
    return df[existing_cols] if existing_cols else pd.DataFrame(columns=SUMMARY_COLUMNS)


def build_memory_table(summaries: Sequence[SampleSummary]) -> pd.DataFrame:
    """One row of memory statistics per sample set."""
    df = pd.DataFrame([s.to_dict() for s in summaries])
    existing_cols = [c for c in MEMORY_COLUMNS if c in df.columns]
    return df[existing_cols] if existing_cols else pd.DataFrame(columns=MEMORY_COLUMNS)


def build_pairs_table(result: ComparisonResult) -> pd.DataFrame:
    """One row per pairwise comparison."""
    rows: List[Dict[str, Any]] = [asdict(p) for p in result.pairs]
    return pd.DataFrame(rows, columns=PAIR_COLUMNS)


def build_groups_table(result: ComparisonResult) -> pd.DataFrame:
    """One row per group, member names joined by commas."""
    rows = []
    for g in result.groups:
        row = asdict(g)
        row["names"] = ", ".join(g.names)
        rows.append(row)
    return pd.DataFrame(rows, columns=GROUP_COLUMNS)
