"""
Validation metrics for a discovered tactic set.

Combines correlation, agreement and cross-validation primitives into the
aggregate reliability scores of :class:`ValidationMetrics`:

- convergent validity: tactics of the same ethical framework should
  correlate (mean |r| over within-framework pairs),
- discriminant validity: tactics of different frameworks should not
  (mean 1 − |r| over cross-framework pairs),
- inter-rater reliability: pairwise rater correlation and within-one-point
  agreement on a shared rating scale,
- test-retest reliability: correlation between two administrations,
- predictive accuracy: overlap of tactic sets discovered at two times,
- cross-validation score: mean fold score from k-fold cross-validation.

Content validity of the tactic definitions themselves comes from an expert
panel rating relevance, clarity and completeness on a 1-7 scale; see
:func:`validate_tactic_definitions`.
"""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from .config import (
    AGREEMENT_LABELS,
    CONTENT_MAX_RELEVANCE_SE,
    CONTENT_QUESTIONABLE_MEAN,
    CONTENT_RECOMMENDATIONS,
    CONTENT_VALID_MEAN,
    MIN_EXPERT_PANEL,
    MIN_SAMPLE_SIZE,
    RATER_AGREEMENT_TOLERANCE,
    RATING_SCALE_MAX,
)
from .errors import DomainError, InsufficientSampleSizeError
from .intervals import as_finite_array, calculate_confidence_interval
from .records import (
    ContentValidity,
    CrossValidationResult,
    InterRaterReliability,
    ValidationMetrics,
)

RATING_COLUMNS = ("rater_id", "response_id", "tactic", "score")
CONTENT_DIMENSIONS = ("relevance", "clarity", "completeness")
EXPERT_RATING_COLUMNS = ("expert_id", "tactic") + CONTENT_DIMENSIONS


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------

def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson r; 0.0 for empty, mismatched or zero-variance input."""
    a = as_finite_array(x, "x")
    b = as_finite_array(y, "y")
    if a.size != b.size or a.size == 0:
        return 0.0

    dx = a - a.mean()
    dy = b - b.mean()
    denominator = float(np.sqrt((dx * dx).sum() * (dy * dy).sum()))
    if denominator == 0:
        return 0.0
    r = float((dx * dy).sum() / denominator)
    return max(-1.0, min(1.0, r))


def correlation_matrix(tactic_scores: pd.DataFrame) -> pd.DataFrame:
    """
    Pairwise Pearson correlations between tactic columns.

    Args:
        tactic_scores: One row per response, one column per tactic; missing
            scores count as 0.

    Returns:
        Square DataFrame indexed by tactic.  Undefined correlations
        (constant columns) are 0.
    """
    filled = tactic_scores.fillna(0.0).astype(float)
    return filled.corr(method="pearson").fillna(0.0).clip(-1.0, 1.0)


def _grouped_pairs(
    groups: Mapping[str, Sequence[str]],
    within: bool,
) -> Iterable[tuple[str, str]]:
    if within:
        for members in groups.values():
            yield from combinations(members, 2)
    else:
        for (_, first), (_, second) in combinations(groups.items(), 2):
            for tactic_a in first:
                for tactic_b in second:
                    yield tactic_a, tactic_b


def _mean_over_pairs(matrix: pd.DataFrame, pairs: Iterable[tuple[str, str]], transform) -> float:
    values = [
        transform(abs(float(matrix.loc[a, b])))
        for a, b in pairs
        if a in matrix.index and b in matrix.columns
    ]
    return float(np.mean(values)) if values else 0.0


def convergent_validity(
    matrix: pd.DataFrame,
    framework_groups: Mapping[str, Sequence[str]],
) -> float:
    """Mean |r| over tactic pairs that share a framework."""
    return _mean_over_pairs(matrix, _grouped_pairs(framework_groups, within=True), lambda r: r)


def discriminant_validity(
    matrix: pd.DataFrame,
    framework_groups: Mapping[str, Sequence[str]],
) -> float:
    """Mean 1 − |r| over tactic pairs from different frameworks."""
    return _mean_over_pairs(
        matrix, _grouped_pairs(framework_groups, within=False), lambda r: 1.0 - r
    )


# ---------------------------------------------------------------------------
# Reliability
# ---------------------------------------------------------------------------

def agreement_label(rate: float) -> str:
    for threshold, label in AGREEMENT_LABELS:
        if rate >= threshold:
            return label
    return "poor"


def inter_rater_reliability(
    ratings: pd.DataFrame,
    tolerance: float = RATER_AGREEMENT_TOLERANCE,
    scale_max: float = RATING_SCALE_MAX,
) -> InterRaterReliability:
    """
    Agreement between raters scoring the same responses and tactics.

    Args:
        ratings: Long-format DataFrame with columns rater_id, response_id,
            tactic, score.  Repeated ratings of one cell are averaged.
        tolerance: Maximum score difference still counted as agreement.
        scale_max: Top of the rating scale, used to normalize each
            rater's spread into a consistency score.

    Returns:
        InterRaterReliability with the mean pairwise Pearson correlation,
        the mean agreement rate, its label, and per-rater consistency
        (raters with a single rating are left out).

    Raises:
        InsufficientSampleSizeError: if fewer than two raters are present.
    """
    missing = [c for c in RATING_COLUMNS if c not in ratings.columns]
    if missing:
        raise DomainError(f"ratings is missing columns: {missing}")

    wide = ratings.pivot_table(
        index=["response_id", "tactic"],
        columns="rater_id",
        values="score",
        aggfunc="mean",
    )
    raters = list(wide.columns)
    if len(raters) < 2:
        raise InsufficientSampleSizeError(len(raters), 2, what="rater")

    correlations: list[float] = []
    agreements: list[float] = []
    for rater_a, rater_b in combinations(raters, 2):
        shared = wide[[rater_a, rater_b]].dropna()
        if shared.empty:
            continue
        correlations.append(pearson_correlation(shared[rater_a], shared[rater_b]))
        within = (shared[rater_a] - shared[rater_b]).abs() <= tolerance
        agreements.append(float(within.mean()))

    consistency: dict[str, float] = {}
    for rater in raters:
        scores = wide[rater].dropna().to_numpy(dtype=float)
        if scores.size > 1:
            consistency[str(rater)] = 1.0 - float(scores.std(ddof=0)) / scale_max

    pearson = float(np.mean(correlations)) if correlations else 0.0
    rate = float(np.mean(agreements)) if agreements else 0.0
    return InterRaterReliability(
        pearson_correlation=pearson,
        agreement_rate=rate,
        agreement=agreement_label(rate),
        rater_consistency=consistency,
    )


def calculate_test_retest_reliability(
    first: Sequence[float],
    second: Sequence[float],
) -> float:
    """Correlation of paired scores from two administrations, clamped to [0, 1]."""
    if len(first) != len(second):
        raise DomainError(
            f"Administrations must be paired: {len(first)} vs {len(second)} scores"
        )
    return max(0.0, min(1.0, pearson_correlation(first, second)))


def tactic_overlap(first: Iterable[str], second: Iterable[str]) -> float:
    """Jaccard overlap of two tactic-name sets; 0.0 when both are empty."""
    a, b = set(first), set(second)
    union = a | b
    return len(a & b) / len(union) if union else 0.0


# ---------------------------------------------------------------------------
# Content validity
# ---------------------------------------------------------------------------

def content_validity_label(overall_mean: float) -> str:
    if overall_mean >= CONTENT_VALID_MEAN:
        return "valid"
    if overall_mean >= CONTENT_QUESTIONABLE_MEAN:
        return "questionable"
    return "invalid"


def validate_tactic_definitions(
    expert_ratings: pd.DataFrame,
    min_sample_size: int = MIN_SAMPLE_SIZE,
) -> ContentValidity:
    """
    Content validity of tactic definitions from expert panel ratings.

    Each dimension (relevance, clarity, completeness) gets its own
    confidence interval over all ratings.  The verdict follows the mean of
    the three dimension means: at least 5.0 is valid, at least 4.0 is
    questionable, anything lower is invalid.  Every dimension below 5.0
    adds a revision recommendation.

    Args:
        expert_ratings: DataFrame with columns expert_id, tactic, relevance,
            clarity, completeness (one row per expert and tactic, 1-7 scale).
        min_sample_size: Fewest ratings accepted per dimension.

    Returns:
        ContentValidity record.

    Raises:
        DomainError: if a column is missing or a rating is not finite.
        InsufficientSampleSizeError: if there are fewer than
            ``min_sample_size`` ratings.
    """
    missing = [c for c in EXPERT_RATING_COLUMNS if c not in expert_ratings.columns]
    if missing:
        raise DomainError(f"expert_ratings is missing columns: {missing}")

    evidence = {
        dimension: calculate_confidence_interval(
            expert_ratings[dimension].to_numpy(dtype=float),
            min_sample_size=min_sample_size,
        )
        for dimension in CONTENT_DIMENSIONS
    }
    overall_mean = float(np.mean([evidence[d].mean for d in CONTENT_DIMENSIONS]))

    recommendations = tuple(
        CONTENT_RECOMMENDATIONS[d]
        for d in CONTENT_DIMENSIONS
        if evidence[d].mean < CONTENT_VALID_MEAN
    )

    limitations = []
    if evidence["relevance"].standard_error > CONTENT_MAX_RELEVANCE_SE:
        limitations.append(
            "High variability in expert relevance ratings suggests unclear construct definition"
        )
    n_experts = int(expert_ratings["expert_id"].nunique())
    if n_experts < MIN_EXPERT_PANEL:
        limitations.append(
            f"Only {n_experts} expert raters; at least {MIN_EXPERT_PANEL} are needed "
            "for robust content validation"
        )

    largest_se = max(evidence[d].standard_error for d in CONTENT_DIMENSIONS)
    return ContentValidity(
        validity=content_validity_label(overall_mean),
        confidence=max(0.0, 1.0 - largest_se),
        relevance=evidence["relevance"],
        clarity=evidence["clarity"],
        completeness=evidence["completeness"],
        recommendations=recommendations,
        limitations=tuple(limitations),
    )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def build_validation_metrics(
    tactic_scores: pd.DataFrame,
    framework_groups: Mapping[str, Sequence[str]],
    ratings: pd.DataFrame,
    first_administration: Sequence[float],
    second_administration: Sequence[float],
    initial_tactics: Iterable[str],
    follow_up_tactics: Iterable[str],
    cross_validation: CrossValidationResult,
) -> ValidationMetrics:
    """Assemble every reliability score for a tactic set into one record."""
    matrix = correlation_matrix(tactic_scores)
    return ValidationMetrics(
        convergent_validity=convergent_validity(matrix, framework_groups),
        discriminant_validity=discriminant_validity(matrix, framework_groups),
        test_retest_reliability=calculate_test_retest_reliability(
            first_administration, second_administration
        ),
        inter_rater_reliability=inter_rater_reliability(ratings).agreement_rate,
        predictive_accuracy=tactic_overlap(initial_tactics, follow_up_tactics),
        cross_validation_score=cross_validation.mean,
    )
