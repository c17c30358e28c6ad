"""Tests for effect size calculations."""

import numpy as np
import pytest

from benchrank.stats.effects import GroupStats, cohen_d, group_stats, pool


def test_cohen_d_basic():
    """Test Cohen's d calculation."""
    x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    y = np.array([2.0, 3.0, 4.0, 5.0, 6.0])
    a = GroupStats(len(x), x.mean(), x.var(ddof=1))
    b = GroupStats(len(y), y.mean(), y.var(ddof=1))

    d = cohen_d(a, b)

    # Mean difference = 1, pooled SD ≈ 1.58, d ≈ 0.63
    assert d == pytest.approx(1.0 / np.sqrt(2.5))
    assert cohen_d(b, a) == d


def test_cohen_d_same_groups():
    """Test Cohen's d for identical groups."""
    g = GroupStats(3, 2.0, 1.0)

    assert cohen_d(g, g) == pytest.approx(0.0, abs=1e-10)


def test_cohen_d_insufficient_data():
    """Test Cohen's d with insufficient data returns NaN."""
    assert np.isnan(cohen_d(GroupStats(1, 1.0, np.nan), GroupStats(2, 2.5, 0.5)))


def test_cohen_d_zero_spread():
    """Zero pooled variance gives 0 rather than a division error."""
    assert cohen_d(GroupStats(4, 1.0, 0.0), GroupStats(4, 2.0, 0.0)) == 0.0


def test_pool_matches_concatenation(make_samples):
    """Pooled statistics equal those of the concatenated observations."""
    a = make_samples("a", [10, 12, 14, 20])
    b = make_samples("b", [30, 35])
    c = make_samples("c", [7])
    combined = np.array([10, 12, 14, 20, 30, 35, 7], dtype=float)

    pooled = pool([group_stats(a), group_stats(b), group_stats(c)])

    assert pooled.count == 7
    assert pooled.mean == pytest.approx(combined.mean())
    assert pooled.variance == pytest.approx(combined.var(ddof=1))


def test_pool_small_inputs():
    """Pooling nothing or one observation leaves variance undefined."""
    empty = pool([])
    single = pool([GroupStats(1, 5.0, np.nan)])

    assert empty.count == 0 and np.isnan(empty.mean)
    assert single.mean == 5.0 and np.isnan(single.variance)
