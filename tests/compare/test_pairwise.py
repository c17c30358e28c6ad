"""Tests for pairwise Welch comparison and compact-letter grouping."""

import pytest

from benchrank.compare.models import ComparisonKind
from benchrank.compare.pairwise import pairwise_welch, significance_level, welch_pairs
from benchrank.config import CompareConfig
from benchrank.errors import InsufficientGroups, InsufficientSamples

PATTERN = [0, 40_000, -40_000, 20_000, -20_000, 10_000, -10_000, 30_000, -30_000, 0]


def _set(make_samples, name, base):
    return make_samples(name, [base + p for p in PATTERN])


def test_ten_vs_twenty_ms_is_significant(jittered_samples):
    """Clearly separated sets differ significantly."""
    fast = jittered_samples("fast", 10_000_000)
    slow = jittered_samples("slow", 20_000_000)
    result = pairwise_welch([fast, slow])

    assert result.kind == ComparisonKind.PAIRWISE
    assert len(result.pairs) == 1
    pair = result.pairs[0]
    assert pair.significant
    assert pair.p_value < 0.05
    assert pair.speedup == pytest.approx(0.5, rel=0.02)
    assert pair.sample_sizes == (50, 50)
    assert result.pair("slow", "fast") is pair
    assert [g.names for g in result.groups] == [("fast",), ("slow",)]


def test_pair_derived_fields(make_samples):
    """Speedup and differences are computed from the means."""
    a = _set(make_samples, "a", 3_000_000)
    b = _set(make_samples, "b", 2_000_000)
    pair = welch_pairs([a, b], ["a", "b"])[0]

    assert pair.speedup == pytest.approx(1.5)
    assert pair.difference == pytest.approx(1_000_000)
    assert pair.relative_difference == pytest.approx(50.0)
    assert pair.significance_level == "p<0.001"


def test_zero_mean_denominator(make_samples):
    """Speedup and relative difference are 0 when mean2 is not positive."""
    a = make_samples("a", [10, 12, 14])
    b = make_samples("b", [0, 0, 0])
    pair = welch_pairs([a, b], ["a", "b"])[0]

    assert pair.speedup == 0.0
    assert pair.relative_difference == 0.0


def test_indistinguishable_sets_share_a_group(make_samples):
    """Sets with identical distributions end up in one group, ranked by mean."""
    slow = _set(make_samples, "slow", 2_000_000)
    a = _set(make_samples, "a", 1_000_000)
    b = _set(make_samples, "b", 1_000_000)
    result = pairwise_welch([slow, a, b])

    assert len(result.pairs) == 3
    assert not result.pair("a", "b").significant
    assert result.pair("a", "b").p_adjusted == pytest.approx(1.0)
    assert [g.rank for g in result.groups] == [1, 2]
    assert result.groups[0].names == ("a", "b")
    assert result.groups[0].members == (1, 2)
    assert result.groups[1].names == ("slow",)
    assert result.group_of("b") is result.groups[0]


def test_adjusted_p_values_not_below_raw(jittered_samples):
    """Holm-adjusted p-values are never smaller than the raw ones."""
    sets = [jittered_samples(f"s{i}", 1_000_000 * (1 + 0.001 * i), jitter=0.02) for i in range(4)]
    result = pairwise_welch(sets)

    assert len(result.pairs) == 6
    for pair in result.pairs:
        assert pair.p_adjusted >= pair.p_value
        assert pair.significant == (pair.p_adjusted < 0.05)


def test_alpha_is_configurable(make_samples):
    """A stricter alpha can turn a significant pair insignificant."""
    a = make_samples("a", [100, 104, 98, 102, 101, 99])
    b = make_samples("b", [103, 106, 101, 105, 102, 104])
    lenient = pairwise_welch([a, b], CompareConfig(alpha=0.5)).pairs[0]
    strict = pairwise_welch([a, b], CompareConfig(alpha=1e-9)).pairs[0]

    assert lenient.significant
    assert not strict.significant
    assert strict.significance_level is None


def test_significance_levels():
    """Adjusted p-values are bucketed."""
    assert significance_level(0.0005) == "p<0.001"
    assert significance_level(0.005) == "p<0.01"
    assert significance_level(0.03) == "p<0.05"
    assert significance_level(0.2) is None
    assert significance_level(float("nan")) is None


def test_significance_levels_fixed_above_default_alpha():
    """A lenient alpha does not add buckets beyond p<0.05."""
    assert significance_level(0.03, alpha=0.2) == "p<0.05"
    assert significance_level(0.1, alpha=0.2) is None
    assert significance_level(0.03, alpha=0.01) is None


def test_pairwise_errors(make_samples):
    """Too few sets or observations are rejected."""
    with pytest.raises(InsufficientGroups):
        welch_pairs([make_samples("a", [1, 2])], ["a"])
    with pytest.raises(InsufficientSamples):
        welch_pairs([make_samples("a", [1, 2]), make_samples("b", [3])], ["a", "b"])
