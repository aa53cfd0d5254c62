"""
Multiple-testing correction for a family of p-values.

- Bonferroni controls the family-wise error rate: p·m, capped at 1.
- Benjamini-Hochberg controls the false discovery rate: step-up
  adjustment p·m/rank with a running minimum from the largest rank down.

BH-adjusted values never exceed the Bonferroni values for the same input.
Both return a new list in the original order; empty input gives [].
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import DomainError


def _validated(p_values: Sequence[float]) -> np.ndarray:
    values = np.array(p_values, dtype=float)
    if values.size and (np.isnan(values).any() or (values < 0).any() or (values > 1).any()):
        raise DomainError("p-values must lie in [0, 1]")
    return values


def bonferroni_correction(p_values: Sequence[float]) -> list[float]:
    """corrected[i] = min(1, p[i]·m) where m = len(p_values)."""
    values = _validated(p_values)
    m = values.size
    return [min(1.0, float(p) * m) for p in values]


def benjamini_hochberg_correction(p_values: Sequence[float]) -> list[float]:
    """
    Benjamini-Hochberg adjusted p-values.

    Sorts ascending, walks from the largest rank down computing p·m/rank,
    keeps the running minimum so adjusted values are monotone in rank, and
    returns them in the caller's original order.
    """
    values = _validated(p_values)
    m = values.size
    if m == 0:
        return []

    # Stable sort keeps tied p-values in input order
    order = np.argsort(values, kind="stable")
    adjusted = np.empty(m, dtype=float)
    cumulative = 1.0
    for rank in range(m, 0, -1):
        index = order[rank - 1]
        cumulative = min(cumulative, float(values[index]) * m / rank)
        adjusted[index] = cumulative

    return adjusted.tolist()


CORRECTION_METHODS = {
    "bonferroni": bonferroni_correction,
    "benjamini_hochberg": benjamini_hochberg_correction,
}


def correct_p_values(
    p_values: Sequence[float],
    method: str = "benjamini_hochberg",
) -> list[float]:
    """Apply the named multiple comparison correction."""
    try:
        correction = CORRECTION_METHODS[method]
    except KeyError:
        raise ValueError(f"Unknown correction method: {method}") from None
    return correction(p_values)
