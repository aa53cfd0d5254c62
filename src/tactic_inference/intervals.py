"""
Confidence interval estimation with a one-sample significance test.

calculate_confidence_interval summarizes a sample of per-response scores:
mean, unbiased variance, standard error, a t-based two-sided interval, a
one-sample t-test against a zero mean, and a standardized effect size.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from .config import CONFIDENCE_LEVEL, MIN_SAMPLE_SIZE, P_VALUE_FLOOR
from .errors import DomainError, InsufficientSampleSizeError
from .records import StatisticalEvidence
from .special import t_critical_value, t_test_p_value

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sample moments
# ---------------------------------------------------------------------------

def as_finite_array(data: Sequence[float], name: str = "data") -> np.ndarray:
    """Copy ``data`` into a float array, rejecting NaN and infinities."""
    values = np.array(data, dtype=float)
    if values.ndim != 1:
        raise DomainError(f"{name} must be one-dimensional")
    if not np.all(np.isfinite(values)):
        raise DomainError(f"{name} contains NaN or infinite values")
    return values


def sample_mean(data: Sequence[float]) -> float:
    values = as_finite_array(data)
    if values.size == 0:
        raise InsufficientSampleSizeError(0, 1)
    return float(values.mean())


def sample_variance(data: Sequence[float]) -> float:
    """Unbiased (n − 1 denominator) sample variance."""
    values = as_finite_array(data)
    if values.size < 2:
        raise InsufficientSampleSizeError(values.size, 2)
    return float(values.var(ddof=1))


def _signed_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, with 0/0 → 0 and x/0 → ±inf."""
    if denominator > 0:
        return numerator / denominator
    if numerator == 0:
        return 0.0
    return math.copysign(math.inf, numerator)


# ---------------------------------------------------------------------------
# Interval estimation
# ---------------------------------------------------------------------------

def calculate_confidence_interval(
    data: Sequence[float],
    confidence_level: float = CONFIDENCE_LEVEL,
    min_sample_size: int = MIN_SAMPLE_SIZE,
) -> StatisticalEvidence:
    """
    Two-sided confidence interval for the mean plus a one-sample t-test.

    The t critical value for n − 1 degrees of freedom comes from
    :func:`special.t_critical_value`.  The t-test is against a zero mean and
    its p-value is floored at 1e-10.  Effect size is mean / sd.

    Zero-variance samples produce a zero-width interval; the t statistic and
    effect size become 0 (zero mean) or ±inf (non-zero mean) rather than NaN.

    Args:
        data: Numeric sample (not modified).
        confidence_level: Interval coverage, strictly between 0 and 1.
        min_sample_size: Smallest sample accepted.  Lower it explicitly to
            work with less data.

    Returns:
        StatisticalEvidence record.

    Raises:
        InsufficientSampleSizeError: if len(data) < min_sample_size.
        DomainError: on an invalid confidence level or non-finite data.
    """
    values = as_finite_array(data)
    n = int(values.size)
    if n < max(min_sample_size, 2):
        raise InsufficientSampleSizeError(n, max(min_sample_size, 2))
    if not 0.0 < confidence_level < 1.0:
        raise DomainError(
            f"Confidence level must be between 0 and 1, got {confidence_level}"
        )

    mean = float(values.mean())
    variance = float(values.var(ddof=1))
    standard_error = math.sqrt(variance / n)
    df = n - 1

    t_crit = t_critical_value(confidence_level, df)
    margin = t_crit * standard_error
    interval = (mean - margin, mean + margin)

    t_statistic = _signed_ratio(mean, standard_error)
    if standard_error == 0:
        p_value = 1.0 if mean == 0 else P_VALUE_FLOOR
        logger.warning(
            "Zero-variance sample of %d observations; t statistic is %s", n, t_statistic
        )
    else:
        p_value = t_test_p_value(t_statistic, df)

    effect_size = _signed_ratio(mean, math.sqrt(variance))

    return StatisticalEvidence(
        observations=n,
        mean=mean,
        variance=variance,
        standard_error=standard_error,
        confidence_interval=interval,
        p_value=p_value,
        effect_size=effect_size,
        significance_level=1.0 - confidence_level,
    )
