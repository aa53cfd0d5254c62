"""
Exception taxonomy for the inference toolkit.

Every error is a local computation error: nothing here is transient, so
callers never retry.  Errors propagate immediately with no partial result.
"""

from __future__ import annotations


class StatisticsError(Exception):
    """Base class for all toolkit errors."""


class InsufficientSampleSizeError(StatisticsError):
    """Sample is smaller than the minimum the computation needs."""

    def __init__(self, observed: int, required: int, what: str = "sample") -> None:
        self.observed = observed
        self.required = required
        super().__init__(
            f"Insufficient {what} size: {observed} < {required}"
        )


class DomainError(StatisticsError, ValueError):
    """A probability, confidence level, or shape parameter is out of range."""


class DegenerateDistributionError(DomainError):
    """A reference distribution has zero variance, so its density is undefined."""


class InvalidFoldCountError(StatisticsError, ValueError):
    """Fold count is incompatible with the dataset size."""

    def __init__(self, k: int, n: int) -> None:
        self.k = k
        self.n = n
        super().__init__(
            f"k ({k}) must be between 2 and the dataset size ({n})"
        )
