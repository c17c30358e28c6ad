"""Tests for Welch's t-test, Holm correction and Welch's ANOVA."""

import math

import numpy as np
import pytest
from scipy import stats

from benchrank.errors import DegenerateVariance, InsufficientGroups, InsufficientSamples
from benchrank.stats.effects import GroupStats
from benchrank.stats.tests import holm_adjust, welch_anova, welch_ttest


def test_welch_ttest_matches_scipy(rng, make_samples):
    """Statistic and p-value agree with scipy's unequal-variance t-test."""
    x = np.round(rng.normal(1000, 50, size=40))
    y = np.round(rng.normal(1030, 120, size=25))
    result = welch_ttest(make_samples("x", x), make_samples("y", y))
    expected = stats.ttest_ind(x, y, equal_var=False)

    assert result.statistic == pytest.approx(expected.statistic, rel=1e-9)
    assert result.p_value == pytest.approx(expected.pvalue, rel=1e-9)


def test_welch_satterthwaite_df():
    """Degrees of freedom follow the Satterthwaite formula."""
    a = GroupStats(10, 5.0, 4.0)
    b = GroupStats(20, 6.0, 9.0)
    va, vb = 4.0 / 10, 9.0 / 20
    expected = (va + vb) ** 2 / (va ** 2 / 9 + vb ** 2 / 19)

    assert welch_ttest(a, b).df == pytest.approx(expected)


def test_welch_ttest_zero_variance():
    """Zero standard error yields t = 0, p = 1 for equal means and p = 0 otherwise."""
    same = welch_ttest(GroupStats(4, 10.0, 0.0), GroupStats(5, 10.0, 0.0))
    differ = welch_ttest(GroupStats(4, 10.0, 0.0), GroupStats(5, 12.0, 0.0))

    assert same.statistic == 0.0 and same.p_value == 1.0
    assert same.df == 7.0
    assert differ.statistic == -math.inf and differ.p_value == 0.0


def test_welch_ttest_insufficient_samples():
    """Each group needs at least two observations."""
    with pytest.raises(InsufficientSamples):
        welch_ttest(GroupStats(1, 1.0, math.nan), GroupStats(3, 2.0, 1.0))


def test_holm_adjust_reference():
    """Holm adjustment matches the step-down formula."""
    p = [0.01, 0.04, 0.03, 0.005]
    # sorted: 0.005*4=0.02, 0.01*3=0.03, 0.03*2=0.06, 0.04*1=0.04 -> max-accumulate 0.06
    assert holm_adjust(p) == pytest.approx([0.03, 0.06, 0.06, 0.02])


def test_holm_adjust_monotone(rng):
    """Sorted adjusted p-values are non-decreasing and never below the raw ones."""
    p = rng.uniform(0, 0.2, size=15)
    adj = holm_adjust(p)
    order = np.argsort(p)

    assert np.all(np.diff(adj[order]) >= 0)
    assert np.all(adj >= p)
    assert np.all(adj <= 1.0)


def test_holm_adjust_keeps_nan():
    """NaN p-values stay NaN and do not count towards the family."""
    adj = holm_adjust([0.01, np.nan, 0.02])

    assert np.isnan(adj[1])
    assert adj[0] == pytest.approx(0.02)
    assert adj[2] == pytest.approx(0.02)


def test_welch_anova_reference():
    """F statistic and degrees of freedom follow Welch's formulas."""
    groups = [GroupStats(10, 5.0, 1.0), GroupStats(12, 6.0, 4.0), GroupStats(8, 8.0, 2.0)]
    n = np.array([10, 12, 8], dtype=float)
    m = np.array([5.0, 6.0, 8.0])
    v = np.array([1.0, 4.0, 2.0])
    w = n / v
    grand = (w * m).sum() / w.sum()
    lam = ((1 - w / w.sum()) ** 2 / (n - 1)).sum()
    f_expected = ((w * (m - grand) ** 2).sum() / 2) / (1 + 2 * 1 * lam / 8)
    df2_expected = 8 / (3 * lam)

    result = welch_anova(groups)

    assert result.statistic == pytest.approx(f_expected)
    assert result.df1 == 2.0
    assert result.df2 == pytest.approx(df2_expected)
    assert result.p_value == pytest.approx(stats.f.sf(f_expected, 2, df2_expected))


def test_welch_anova_two_groups_matches_ttest():
    """With two groups, F equals the squared Welch t statistic."""
    a, b = GroupStats(15, 100.0, 25.0), GroupStats(20, 104.0, 64.0)
    anova = welch_anova([a, b])
    ttest = welch_ttest(a, b)

    assert anova.statistic == pytest.approx(ttest.statistic ** 2)
    assert anova.df2 == pytest.approx(ttest.df)
    assert anova.p_value == pytest.approx(ttest.p_value)


def test_welch_anova_errors():
    """Degenerate inputs raise explicit errors."""
    ok = GroupStats(5, 1.0, 1.0)
    with pytest.raises(InsufficientGroups):
        welch_anova([ok])
    with pytest.raises(InsufficientSamples):
        welch_anova([ok, GroupStats(1, 2.0, math.nan)])
    with pytest.raises(DegenerateVariance):
        welch_anova([ok, GroupStats(5, 2.0, 0.0)])


def test_welch_anova_accepts_samples(make_samples):
    """Sample aggregates can be passed directly."""
    a = make_samples("a", [10, 12, 11, 13])
    b = make_samples("b", [30, 33, 29, 31])

    assert welch_anova([a, b]).p_value < 0.001
