"""Statistics for benchmark sample sets.

- Normal quantile function (AS 241 with Halley refinement)
- Outlier detection (Tukey fences, MAD modified z-score)
- Descriptive summaries with confidence intervals and quality labels
- Welch t-test, Holm correction and Welch ANOVA
- Effect sizes (Cohen's d) and pooled group statistics
- Trend and distribution of observations

Public API:
-----------
from benchrank.stats import describe, detect_outliers, z_value

summary = describe(samples)
indices = detect_outliers(samples, method="mad")
"""

from benchrank.stats.distribution import Distribution, distribution
from benchrank.stats.effects import GroupStats, cohen_d, group_stats, pool
from benchrank.stats.outliers import OutlierReport, detect_outliers, outlier_report
from benchrank.stats.quantile import normal_quantile, z_value
from benchrank.stats.summary import MemoryStats, SampleSummary, classify_quality, describe
from benchrank.stats.tests import WelchAnovaResult, WelchTTestResult, holm_adjust, welch_anova, welch_ttest
from benchrank.stats.trend import TrendResult, trend

__all__ = [
    "Distribution",
    "GroupStats",
    "MemoryStats",
    "OutlierReport",
    "SampleSummary",
    "TrendResult",
    "WelchAnovaResult",
    "WelchTTestResult",
    "classify_quality",
    "cohen_d",
    "describe",
    "detect_outliers",
    "distribution",
    "group_stats",
    "holm_adjust",
    "normal_quantile",
    "outlier_report",
    "pool",
    "trend",
    "welch_anova",
    "welch_ttest",
    "z_value",
]
