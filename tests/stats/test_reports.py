"""Tests for report tables."""

from benchrank import compare
from benchrank.config import CompareConfig
from benchrank.stats.reports import (
    GROUP_COLUMNS,
    PAIR_COLUMNS,
    build_groups_table,
    build_memory_table,
    build_pairs_table,
    build_run_manifest,
    build_summary_table,
)
from benchrank.stats.summary import describe


def _sets(make_samples):
    return [
        make_samples("a", [100, 102, 98, 101]),
        make_samples("b", [200, 205, 195, 201]),
    ]


def test_summary_and_memory_tables(make_samples):
    """Summary tables have one row per set."""
    summaries = [describe(s) for s in _sets(make_samples)]
    table = build_summary_table(summaries)
    memory = build_memory_table(summaries)

    assert list(table["name"]) == ["a", "b"]
    assert "rciw" in table.columns
    assert list(memory.columns)[0] == "name"
    assert len(memory) == 2


def test_pairs_and_groups_tables(make_samples):
    """Comparison tables follow the fixed column order."""
    result = compare(_sets(make_samples))
    pairs = build_pairs_table(result)
    groups = build_groups_table(result)

    assert list(pairs.columns) == PAIR_COLUMNS
    assert list(groups.columns) == GROUP_COLUMNS
    assert len(pairs) == 1
    assert list(groups["names"]) == ["a", "b"]


def test_empty_pairs_table(make_samples):
    """A single set produces an empty pairs table with headers."""
    result = compare([make_samples("solo", [1, 2, 3])])

    assert build_pairs_table(result).empty
    assert list(build_pairs_table(result).columns) == PAIR_COLUMNS


def test_run_manifest(make_samples):
    """The manifest records method and thresholds."""
    result = compare(_sets(make_samples))
    manifest = build_run_manifest(result, CompareConfig(alpha=0.01), 2)
    values = dict(zip(manifest["parameter"], manifest["value"]))

    assert values["algorithm"] == "welch-t-test-holm-correction"
    assert values["alpha"] == 0.01
    assert values["n_sample_sets"] == 2
