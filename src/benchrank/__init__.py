"""
benchrank: statistics and ranking for benchmark measurements.

This package provides:
- Fixed-capacity sample aggregates with streaming (Welford) statistics
- Descriptive summaries, confidence intervals and outlier detection
- Welch t-tests with Holm correction and compact letter grouping
- Scott-Knott ESD clustering for larger sets of benchmarks
- A CLI for summarizing and comparing exported sample records
"""

__version__ = "0.1.0"

from benchrank.samples import SampleAggregate
from benchrank.config import CompareConfig, SummaryConfig
from benchrank.compare import compare
from benchrank.api import analyze

__all__ = [
    "__version__",
    "SampleAggregate",
    "CompareConfig",
    "SummaryConfig",
    "compare",
    "analyze",
]
