"""Pytest configuration and fixtures."""

import pytest
import numpy as np

from benchrank.samples import SampleAggregate


def build_samples(name, times, capacity=None, memory=None, **kwargs):
    """Create a SampleAggregate filled with the given times (and optional (before, after) pairs)."""
    times = [int(t) for t in times]
    samples = SampleAggregate(capacity or max(1, len(times)), name=name, **kwargs)
    for i, t in enumerate(times):
        before, after = memory[i] if memory is not None else (0, 0)
        samples.append(t, before, after)
    return samples


@pytest.fixture
def make_samples():
    """Factory fixture building named sample aggregates."""
    return build_samples


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def jittered_samples(rng):
    """Factory for sample sets around a mean (ns) with small uniform jitter."""

    def _make(name, mean_ns, n=50, jitter=0.01):
        times = mean_ns * (1.0 + rng.uniform(-jitter, jitter, size=n))
        return build_samples(name, np.round(times))

    return _make


@pytest.fixture
def sample_records_file(tmp_path, make_samples):
    """JSON file with three exported sample sets."""
    from benchrank.io.records import save_records

    pattern = [0, 40_000, -40_000, 20_000, -20_000, 10_000, -10_000, 30_000, -30_000, 0]
    aggregates = [
        make_samples("fast", [1_000_000 + p for p in pattern]),
        make_samples("medium", [2_000_000 + p for p in pattern]),
        make_samples("slow", [4_000_000 + p for p in pattern]),
    ]
    return save_records(tmp_path / "records.json", aggregates)
