"""
Effect size and power analysis.

Power uses the normal approximation for a one-sample t-test:
ncp = d·√n and power ≈ 1 − Φ(t_crit − ncp).  The required-sample-size
search walks n upward from 3 and returns MAX_SAMPLE_SIZE (10 000) when the
target power is never reached; callers must check for that cap.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .config import (
    ALPHA,
    DEFAULT_POWER,
    EFFECT_SIZE_THRESHOLDS,
    MAX_SAMPLE_SIZE,
    MIN_SEARCH_SAMPLE_SIZE,
)
from .errors import DomainError, InsufficientSampleSizeError
from .intervals import as_finite_array
from .special import normal_cdf, t_critical_value

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Cohen's d
# ---------------------------------------------------------------------------

def calculate_cohens_d(group1: Sequence[float], group2: Sequence[float]) -> float:
    """
    Standardized mean difference (group1 − group2) / pooled SD.

    The pooled SD weights each group's unbiased variance by n − 1.  When the
    pooled SD is zero the ratio is undefined; this returns 0.0 for equal
    means and a signed infinity otherwise, and logs a warning, so callers
    can test with ``math.isinf`` instead of receiving NaN.

    Raises:
        InsufficientSampleSizeError: if either group has fewer than 2 values.
    """
    a = as_finite_array(group1, "group1")
    b = as_finite_array(group2, "group2")
    for values in (a, b):
        if values.size < 2:
            raise InsufficientSampleSizeError(values.size, 2, what="group")

    n1, n2 = a.size, b.size
    pooled_var = ((n1 - 1) * a.var(ddof=1) + (n2 - 1) * b.var(ddof=1)) / (n1 + n2 - 2)
    pooled_sd = math.sqrt(float(pooled_var))
    difference = float(a.mean() - b.mean())

    if pooled_sd == 0:
        if difference == 0:
            return 0.0
        logger.warning(
            "Cohen's d undefined: zero within-group variance with mean difference %.4g",
            difference,
        )
        return math.copysign(math.inf, difference)

    return difference / pooled_sd


def interpret_cohens_d(d: float) -> str:
    """
    Conventional magnitude label: negligible / small / medium / large.

    Infinite or NaN d (zero within-group variance) is labelled "undefined".
    """
    if not math.isfinite(d):
        return "undefined"
    magnitude = abs(d)
    if magnitude >= EFFECT_SIZE_THRESHOLDS["large"]:
        return "large"
    if magnitude >= EFFECT_SIZE_THRESHOLDS["medium"]:
        return "medium"
    if magnitude >= EFFECT_SIZE_THRESHOLDS["small"]:
        return "small"
    return "negligible"


# ---------------------------------------------------------------------------
# Power and sample size
# ---------------------------------------------------------------------------

def calculate_statistical_power(
    effect_size: float,
    sample_size: int,
    alpha: float = ALPHA,
) -> float:
    """
    Approximate power of a one-sample t-test, clamped to [0, 1].

    Args:
        effect_size: Standardized effect (Cohen's d).
        sample_size: Number of observations, at least 2.
        alpha: Significance level in (0, 1).
    """
    if sample_size < 2:
        raise InsufficientSampleSizeError(sample_size, 2)
    if not 0.0 < alpha < 1.0:
        raise DomainError(f"alpha must be between 0 and 1, got {alpha}")

    ncp = effect_size * math.sqrt(sample_size)
    critical_t = t_critical_value(1.0 - alpha, sample_size - 1)
    power = 1.0 - normal_cdf(critical_t - ncp)
    return max(0.0, min(1.0, power))


def calculate_required_sample_size(
    expected_effect_size: float,
    desired_power: float = DEFAULT_POWER,
    alpha: float = ALPHA,
) -> int:
    """
    Smallest n in [3, 10 000] whose power meets ``desired_power``.

    Returns MAX_SAMPLE_SIZE when the target is unreachable within the
    search bound (e.g. a zero effect size).  Use
    :func:`is_power_target_unreachable` to detect that case.
    """
    if not 0.0 < desired_power < 1.0:
        raise DomainError(f"desired_power must be between 0 and 1, got {desired_power}")

    for n in range(MIN_SEARCH_SAMPLE_SIZE, MAX_SAMPLE_SIZE + 1):
        if calculate_statistical_power(expected_effect_size, n, alpha) >= desired_power:
            return n

    logger.warning(
        "Power %.2f unreachable for effect size %.4g within n <= %d",
        desired_power, expected_effect_size, MAX_SAMPLE_SIZE,
    )
    return MAX_SAMPLE_SIZE


def is_power_target_unreachable(sample_size: int) -> bool:
    """True when a required-sample-size result is the search cap."""
    return sample_size >= MAX_SAMPLE_SIZE
