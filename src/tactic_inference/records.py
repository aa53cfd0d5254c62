"""
Result records returned by the inference functions.

Records are immutable and carry no identity beyond their values; each call
builds a fresh one.  ``to_dict`` gives a JSON-ready view for report export.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from .config import OVERFITTING_HIGH_STD, OVERFITTING_MEDIUM_STD


@dataclass(frozen=True)
class StatisticalEvidence:
    """One-sample summary: interval, significance test, and effect size."""
    observations: int
    mean: float
    variance: float
    standard_error: float
    confidence_interval: tuple[float, float]
    p_value: float
    effect_size: float
    significance_level: float

    @property
    def margin_of_error(self) -> float:
        return self.confidence_interval[1] - self.mean

    @property
    def significant(self) -> bool:
        """True when the mean differs from zero at ``significance_level``."""
        return self.p_value < self.significance_level

    def to_dict(self) -> dict:
        data = asdict(self)
        data["confidence_interval"] = list(self.confidence_interval)
        data["significant"] = self.significant
        return data


@dataclass(frozen=True)
class BayesianTacticAnalysis:
    """Posterior belief that a tactic is genuinely present."""
    posterior: float
    prior: float
    likelihood: float
    credible_interval: tuple[float, float]
    bayes_factor: float

    def to_dict(self) -> dict:
        data = asdict(self)
        data["credible_interval"] = list(self.credible_interval)
        return data


@dataclass(frozen=True)
class CrossValidationResult:
    """Mean and population standard deviation of per-fold scores."""
    mean: float
    std: float
    folds: tuple[float, ...]

    @property
    def stability_score(self) -> float:
        return 1.0 - self.std

    @property
    def overfitting_risk(self) -> str:
        if self.std > OVERFITTING_HIGH_STD:
            return "high"
        if self.std > OVERFITTING_MEDIUM_STD:
            return "medium"
        return "low"

    def to_dict(self) -> dict:
        return {
            "mean": self.mean,
            "std": self.std,
            "folds": list(self.folds),
            "stability_score": self.stability_score,
            "overfitting_risk": self.overfitting_risk,
        }


@dataclass(frozen=True)
class InterRaterReliability:
    pearson_correlation: float
    agreement_rate: float
    agreement: str
    # Per-rater 1 - sd/scale_max over all of that rater's scores
    rater_consistency: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ValidationMetrics:
    """
    Aggregate reliability scores for a discovered tactic set.

    Every field is a float in [0, 1]; they are combinations of the other
    primitives rather than new estimators.
    """
    convergent_validity: float
    discriminant_validity: float
    test_retest_reliability: float
    inter_rater_reliability: float
    predictive_accuracy: float
    cross_validation_score: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ContentValidity:
    """
    Expert-panel verdict on a tactic set's definitions.

    ``validity`` is "valid", "questionable" or "invalid" from the mean of
    the three dimension means.  ``confidence`` is 1 minus the largest
    dimension standard error, floored at 0.
    """
    validity: str
    confidence: float
    relevance: StatisticalEvidence
    clarity: StatisticalEvidence
    completeness: StatisticalEvidence
    recommendations: tuple[str, ...]
    limitations: tuple[str, ...]

    @property
    def overall_mean(self) -> float:
        return (self.relevance.mean + self.clarity.mean + self.completeness.mean) / 3.0

    def to_dict(self) -> dict:
        return {
            "validity": self.validity,
            "confidence": self.confidence,
            "overall_mean": self.overall_mean,
            "relevance": self.relevance.to_dict(),
            "clarity": self.clarity.to_dict(),
            "completeness": self.completeness.to_dict(),
            "recommendations": list(self.recommendations),
            "limitations": list(self.limitations),
        }
