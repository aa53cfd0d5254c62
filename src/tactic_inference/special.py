"""
Special functions: closed-form approximations for the normal, t and beta
distributions.

The approximations are lightweight and accurate enough for the
moderate sample sizes the toolkit sees:

- erf: Abramowitz & Stegun 7.1.26, max absolute error ≈ 1.5e-7.
- normal_quantile: Beasley-Springer-Moro central rational branch with a
  rational tail (Hastings) for |p - 0.5| ≥ 0.42.
- t critical values and p-values: first-order corrections of the normal.
- beta_quantile: closed forms for unit shapes, a normal approximation for
  large shapes, and the distribution mean otherwise.  ``exact=True`` switches
  to scipy's incomplete-beta inverse behind the same contract.
"""

from __future__ import annotations

import math

from scipy import special as sp_special

from .config import (
    BETA_NORMAL_APPROX_MIN_SHAPE,
    LARGE_DF_THRESHOLD,
    P_VALUE_FLOOR,
)
from .errors import DomainError

# Abramowitz & Stegun 7.1.26
_AS_P = 0.3275911
_AS_COEFFS = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)

# Beasley-Springer-Moro, central region
_BSM_A = (2.50662823884, -18.61500062529, 41.39119773534, -25.44106049637)
_BSM_B = (-8.47351093090, 23.08336743743, -21.06224101826, 3.13082909833)

# Rational tail approximation
_TAIL_C = (2.515517, 0.802853, 0.010328)
_TAIL_D = (1.432788, 0.189269, 0.001308)

_SQRT_2 = math.sqrt(2.0)
_SQRT_2PI = math.sqrt(2.0 * math.pi)


# ---------------------------------------------------------------------------
# Normal distribution
# ---------------------------------------------------------------------------

def erf(x: float) -> float:
    """Error function via the Abramowitz-Stegun rational approximation."""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)

    a1, a2, a3, a4, a5 = _AS_COEFFS
    t = 1.0 / (1.0 + _AS_P * x)
    poly = ((((a5 * t + a4) * t + a3) * t + a2) * t + a1) * t
    return sign * (1.0 - poly * math.exp(-x * x))


def normal_cdf(x: float) -> float:
    """Standard normal CDF, Φ(x) = ½·(1 + erf(x/√2))."""
    return 0.5 * (1.0 + erf(x / _SQRT_2))


def normal_pdf(x: float, mean: float = 0.0, std: float = 1.0) -> float:
    """Normal density.  ``std`` must be positive."""
    if std <= 0:
        raise DomainError(f"Standard deviation must be positive, got {std}")
    z = (x - mean) / std
    return math.exp(-0.5 * z * z) / (std * _SQRT_2PI)


def normal_quantile(p: float) -> float:
    """
    Inverse standard normal CDF, Φ⁻¹(p).

    Args:
        p: Probability strictly between 0 and 1.

    Returns:
        z such that Φ(z) ≈ p.

    Raises:
        DomainError: if p ≤ 0 or p ≥ 1.
    """
    if not 0.0 < p < 1.0:
        raise DomainError(f"Probability must be between 0 and 1, got {p}")

    y = p - 0.5
    if abs(y) < 0.42:
        a0, a1, a2, a3 = _BSM_A
        b1, b2, b3, b4 = _BSM_B
        r = y * y
        num = ((a3 * r + a2) * r + a1) * r + a0
        den = (((b4 * r + b3) * r + b2) * r + b1) * r + 1.0
        return y * num / den

    r = p if p < 0.5 else 1.0 - p
    s = math.sqrt(-2.0 * math.log(r))
    c0, c1, c2 = _TAIL_C
    d1, d2, d3 = _TAIL_D
    t = s - (c0 + c1 * s + c2 * s * s) / (1.0 + d1 * s + d2 * s * s + d3 * s ** 3)
    return -t if p < 0.5 else t


# ---------------------------------------------------------------------------
# t distribution (normal-based approximations)
# ---------------------------------------------------------------------------

def t_critical_value(confidence_level: float, df: int) -> float:
    """
    Two-sided t critical value for ``confidence_level`` and ``df`` degrees
    of freedom.

    Uses the normal quantile for df ≥ 30 and the first-order expansion
    z + z³/(4·df) below that.
    """
    if not 0.0 < confidence_level < 1.0:
        raise DomainError(
            f"Confidence level must be between 0 and 1, got {confidence_level}"
        )
    if df < 1:
        raise DomainError(f"Degrees of freedom must be at least 1, got {df}")

    alpha = 1.0 - confidence_level
    z = normal_quantile(1.0 - alpha / 2.0)
    if df >= LARGE_DF_THRESHOLD:
        return z
    return z + z ** 3 / (4.0 * df)


def t_test_p_value(t_statistic: float, df: int) -> float:
    """
    Two-tailed p-value for a t statistic.

    The normal tail is inflated by 1 + t²/(4·df) for small df.  The result
    is floored at P_VALUE_FLOOR and capped at 1, so it always lies in (0, 1].
    """
    if df < 1:
        raise DomainError(f"Degrees of freedom must be at least 1, got {df}")
    if math.isnan(t_statistic):
        raise DomainError("t statistic is NaN")
    if math.isinf(t_statistic):
        return P_VALUE_FLOOR

    p_value = 2.0 * (1.0 - normal_cdf(abs(t_statistic)))
    if df < LARGE_DF_THRESHOLD:
        p_value *= 1.0 + t_statistic * t_statistic / (4.0 * df)
    return min(1.0, max(P_VALUE_FLOOR, p_value))


# ---------------------------------------------------------------------------
# Beta distribution
# ---------------------------------------------------------------------------

def beta_quantile(p: float, a: float, b: float, exact: bool = False) -> float:
    """
    Quantile of Beta(a, b) at probability ``p``.

    Exact for a == 1 or b == 1.  For a, b > 5 a normal approximation around
    the mean is used; for other small shapes the mean is returned, which is
    only a rough stand-in.  Pass ``exact=True`` for the true inverse of the
    regularized incomplete beta function.

    Returns:
        A value in [0, 1].
    """
    if not 0.0 < p < 1.0:
        raise DomainError(f"Probability must be between 0 and 1, got {p}")
    if a <= 0 or b <= 0:
        raise DomainError(f"Beta shape parameters must be positive, got ({a}, {b})")

    if exact:
        return float(sp_special.betaincinv(a, b, p))

    if a == 1 and b == 1:
        return p
    if a == 1:
        return 1.0 - (1.0 - p) ** (1.0 / b)
    if b == 1:
        return p ** (1.0 / a)

    mean = a / (a + b)
    if a > BETA_NORMAL_APPROX_MIN_SHAPE and b > BETA_NORMAL_APPROX_MIN_SHAPE:
        variance = (a * b) / ((a + b) ** 2 * (a + b + 1.0))
        value = mean + normal_quantile(p) * math.sqrt(variance)
        return min(1.0, max(0.0, value))

    return mean
