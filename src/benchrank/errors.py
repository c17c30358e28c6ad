"""Exception hierarchy for benchrank."""

from __future__ import annotations


class BenchrankError(Exception):
    """Base class for all benchrank errors."""


class InvalidArgument(BenchrankError, ValueError):
    """An argument is outside its accepted domain."""


class InsufficientData(BenchrankError, ValueError):
    """Too few observations for the requested statistic."""


class InsufficientGroups(InsufficientData):
    """Fewer sample sets than the test requires."""


class InsufficientSamples(InsufficientData):
    """A sample set has fewer observations than the test requires."""


class DegenerateVariance(BenchrankError, ValueError):
    """A sample set has zero or non-finite variance where a positive one is required."""


class InvalidState(BenchrankError, ValueError):
    """A serialized aggregate record is malformed or inconsistent."""


class CapacityExceeded(BenchrankError, RuntimeError):
    """Append attempted on a full sample aggregate."""
