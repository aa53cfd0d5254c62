"""
tactic_inference — statistical confidence for behavioral tactics discovered
in free-text responses.

Module layout
-------------
config.py        Significance defaults, thresholds, output paths, logging setup
errors.py        Exception taxonomy
records.py       Immutable result records
special.py       erf, normal CDF/PDF/quantile, t and beta approximations
intervals.py     Confidence interval + one-sample t-test
bayesian.py      Posterior probability, credible interval, Bayes factor
corrections.py   Bonferroni and Benjamini-Hochberg adjustment
resampling.py    Bootstrap intervals and k-fold cross-validation
power.py         Cohen's d, power, required sample size
validation.py    Aggregate validation metrics
report.py        Tactic evidence report runner (JSON/CSV export)

Public interface
----------------
    calculate_confidence_interval(data)
    calculate_bayesian_tactic_probability(evidence, prior, baseline)
    bonferroni_correction(p_values) / benjamini_hochberg_correction(p_values)
    bootstrap_confidence_interval(data, statistic, rng=seed)
    k_fold_cross_validation(data, k, train, test, rng=seed)
    calculate_cohens_d(group1, group2)
    calculate_statistical_power(effect_size, n)
    calculate_required_sample_size(effect_size)
    build_validation_metrics(...)
    validate_tactic_definitions(expert_ratings)
    run_tactic_evidence_report(tactic_scores, baseline)
"""

from .bayesian import calculate_bayesian_tactic_probability
from .corrections import (
    benjamini_hochberg_correction,
    bonferroni_correction,
    correct_p_values,
)
from .errors import (
    DegenerateDistributionError,
    DomainError,
    InsufficientSampleSizeError,
    InvalidFoldCountError,
    StatisticsError,
)
from .intervals import calculate_confidence_interval
from .power import (
    calculate_cohens_d,
    calculate_required_sample_size,
    calculate_statistical_power,
    interpret_cohens_d,
    is_power_target_unreachable,
)
from .records import (
    BayesianTacticAnalysis,
    ContentValidity,
    CrossValidationResult,
    InterRaterReliability,
    StatisticalEvidence,
    ValidationMetrics,
)
from .report import run_tactic_evidence_report
from .resampling import (
    bootstrap_confidence_interval,
    bootstrap_sample,
    k_fold_cross_validation,
    kfold_indices,
    make_rng,
)
from .special import (
    beta_quantile,
    erf,
    normal_cdf,
    normal_pdf,
    normal_quantile,
    t_critical_value,
    t_test_p_value,
)
from .validation import (
    build_validation_metrics,
    calculate_test_retest_reliability,
    convergent_validity,
    correlation_matrix,
    discriminant_validity,
    inter_rater_reliability,
    pearson_correlation,
    tactic_overlap,
    validate_tactic_definitions,
)

__all__ = [
    # Special functions
    "erf",
    "normal_cdf",
    "normal_pdf",
    "normal_quantile",
    "beta_quantile",
    "t_critical_value",
    "t_test_p_value",
    # Estimators
    "calculate_confidence_interval",
    "calculate_bayesian_tactic_probability",
    # Corrections
    "bonferroni_correction",
    "benjamini_hochberg_correction",
    "correct_p_values",
    # Resampling
    "make_rng",
    "bootstrap_sample",
    "bootstrap_confidence_interval",
    "kfold_indices",
    "k_fold_cross_validation",
    # Effect size & power
    "calculate_cohens_d",
    "interpret_cohens_d",
    "calculate_statistical_power",
    "calculate_required_sample_size",
    "is_power_target_unreachable",
    # Validation
    "pearson_correlation",
    "correlation_matrix",
    "convergent_validity",
    "discriminant_validity",
    "inter_rater_reliability",
    "calculate_test_retest_reliability",
    "tactic_overlap",
    "build_validation_metrics",
    "validate_tactic_definitions",
    # Runner
    "run_tactic_evidence_report",
    # Records
    "StatisticalEvidence",
    "BayesianTacticAnalysis",
    "ContentValidity",
    "CrossValidationResult",
    "InterRaterReliability",
    "ValidationMetrics",
    # Errors
    "StatisticsError",
    "InsufficientSampleSizeError",
    "DomainError",
    "DegenerateDistributionError",
    "InvalidFoldCountError",
]
