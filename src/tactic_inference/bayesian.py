"""
Bayesian tactic identification.

    P(tactic | evidence) = P(evidence | tactic) · P(tactic) / P(evidence)

The likelihood of the evidence is the normal density of its mean under the
population baseline's mean and (population) variance.  The null likelihood
is a fixed indifference constant rather than a marginal computed from the
baseline, so the posterior is a heuristic score, not a calibrated
probability.  The credible interval comes from a Beta-Binomial conjugate
update that treats scores above 0.5 as successes.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .config import (
    CREDIBLE_LEVEL,
    NULL_LIKELIHOOD,
    PRIOR_STRENGTH,
    SUCCESS_THRESHOLD,
)
from .errors import DegenerateDistributionError, DomainError, InsufficientSampleSizeError
from .intervals import as_finite_array
from .records import BayesianTacticAnalysis
from .special import beta_quantile, normal_pdf

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Components of Bayes' rule
# ---------------------------------------------------------------------------

def calculate_likelihood(
    evidence: Sequence[float],
    population_baseline: Sequence[float],
) -> float:
    """
    P(evidence | tactic): normal density of the evidence mean under the
    baseline distribution.

    Raises:
        InsufficientSampleSizeError: if either array is empty.
        DegenerateDistributionError: if the baseline has zero variance.
    """
    values = as_finite_array(evidence, "evidence")
    baseline = as_finite_array(population_baseline, "population_baseline")
    if values.size == 0:
        raise InsufficientSampleSizeError(0, 1, what="evidence")
    if baseline.size == 0:
        raise InsufficientSampleSizeError(0, 1, what="baseline")

    baseline_std = math.sqrt(float(baseline.var(ddof=0)))
    if baseline_std == 0:
        raise DegenerateDistributionError(
            "Population baseline has zero variance; its density is undefined"
        )
    return normal_pdf(float(values.mean()), float(baseline.mean()), baseline_std)


def calculate_marginal_probability(
    likelihood: float,
    prior_probability: float,
    null_likelihood: float = NULL_LIKELIHOOD,
) -> float:
    """P(evidence) = L·prior + L₀·(1 − prior)."""
    return likelihood * prior_probability + null_likelihood * (1.0 - prior_probability)


def calculate_credible_interval(
    evidence: Sequence[float],
    prior_probability: float,
    credible_level: float = CREDIBLE_LEVEL,
    exact: bool = False,
) -> tuple[float, float]:
    """
    Equal-tailed credible interval for the tactic's success rate.

    Beta(s + prior·10, n − s + (1 − prior)·10), where s counts evidence
    values above 0.5 and the prior is worth 10 pseudo-observations.
    """
    values = as_finite_array(evidence, "evidence")
    successes = int((values > SUCCESS_THRESHOLD).sum())
    trials = int(values.size)

    a = successes + prior_probability * PRIOR_STRENGTH
    b = trials - successes + (1.0 - prior_probability) * PRIOR_STRENGTH
    tail = (1.0 - credible_level) / 2.0

    # A certain prior with no contrary evidence puts all mass on one endpoint.
    if a == 0:
        return (0.0, 0.0)
    if b == 0:
        return (1.0, 1.0)

    lower = beta_quantile(tail, a, b, exact=exact)
    upper = beta_quantile(1.0 - tail, a, b, exact=exact)
    return (min(lower, upper), max(lower, upper))


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def calculate_bayesian_tactic_probability(
    evidence: Sequence[float],
    prior_probability: float,
    population_baseline: Sequence[float],
    exact_credible_interval: bool = False,
) -> BayesianTacticAnalysis:
    """
    Posterior probability that a behavioral tactic is genuinely present.

    Args:
        evidence: Per-observation scores for the tactic (0/1 indicators or
            strengths in [0, 1]).
        prior_probability: Prior belief in [0, 1].
        population_baseline: Scores from the background population.
        exact_credible_interval: Use the exact Beta inverse for the
            credible interval instead of the closed-form approximation.

    Returns:
        BayesianTacticAnalysis with posterior, prior, likelihood, credible
        interval and Bayes factor (likelihood / null likelihood).

    Raises:
        DomainError: if the prior is outside [0, 1].
        InsufficientSampleSizeError: if evidence or baseline is empty.
        DegenerateDistributionError: if the baseline has zero variance.
    """
    if not 0.0 <= prior_probability <= 1.0:
        raise DomainError(
            f"Prior probability must be in [0, 1], got {prior_probability}"
        )

    likelihood = calculate_likelihood(evidence, population_baseline)
    marginal = calculate_marginal_probability(likelihood, prior_probability)
    # marginal is 0 only when prior == 1 and the likelihood underflowed
    posterior = likelihood * prior_probability / marginal if marginal > 0 else prior_probability

    credible_interval = calculate_credible_interval(
        evidence, prior_probability, exact=exact_credible_interval
    )
    bayes_factor = likelihood / NULL_LIKELIHOOD

    logger.debug(
        "Bayesian update: prior=%.3f likelihood=%.4g posterior=%.4f BF=%.4g",
        prior_probability, likelihood, posterior, bayes_factor,
    )

    return BayesianTacticAnalysis(
        posterior=posterior,
        prior=prior_probability,
        likelihood=likelihood,
        credible_interval=credible_interval,
        bayes_factor=bayes_factor,
    )
