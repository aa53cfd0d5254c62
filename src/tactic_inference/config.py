"""
Toolkit configuration: significance defaults, sample-size thresholds,
approximation constants, and output paths.

All constants shared across the inference modules are centralized here so
that configuration is separated from logic.
"""

from __future__ import annotations

import logging
from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Resolve from this file: src/tactic_inference/config.py → src → root
PROJECT_ROOT = Path(__file__).resolve().parents[2]

RESULTS_DIR = PROJECT_ROOT / "results"   # tactic evidence reports

# ---------------------------------------------------------------------------
# Significance and interval defaults
# ---------------------------------------------------------------------------

ALPHA: float = 0.05
CONFIDENCE_LEVEL: float = 0.95
MIN_SAMPLE_SIZE: int = 10          # interval estimation refuses smaller samples

# Smallest p-value ever reported; exact zero is meaningless for a
# continuous test statistic.
P_VALUE_FLOOR: float = 1e-10

# Degrees of freedom at which the t-distribution is replaced by the normal.
LARGE_DF_THRESHOLD: int = 30

# ---------------------------------------------------------------------------
# Bayesian engine
# ---------------------------------------------------------------------------

NULL_LIKELIHOOD: float = 0.5       # indifference under the null hypothesis
PRIOR_STRENGTH: float = 10.0       # pseudo-observations behind the prior
SUCCESS_THRESHOLD: float = 0.5     # evidence > threshold counts as a success
CREDIBLE_LEVEL: float = 0.95

# Both Beta shape parameters must exceed this for the normal approximation.
BETA_NORMAL_APPROX_MIN_SHAPE: float = 5.0

# ---------------------------------------------------------------------------
# Resampling
# ---------------------------------------------------------------------------

DEFAULT_BOOTSTRAP_ITERATIONS: int = 1000
# Iterations per independently seeded work unit; fixed so a seed gives the
# same interval whatever n_jobs is.
BOOTSTRAP_CHUNK_SIZE: int = 250
MIN_FOLDS: int = 2

# Cross-validation stability labels (fold-score std)
OVERFITTING_HIGH_STD: float = 0.2
OVERFITTING_MEDIUM_STD: float = 0.1

# ---------------------------------------------------------------------------
# Power analysis
# ---------------------------------------------------------------------------

DEFAULT_POWER: float = 0.8
MIN_SEARCH_SAMPLE_SIZE: int = 3
MAX_SAMPLE_SIZE: int = 10_000      # returned as-is when the target is unreachable

# Effect size planned for sample-size recommendations in reports
PLANNED_EFFECT_SIZE: float = 0.5

# Cohen's conventional magnitude cut-offs
EFFECT_SIZE_THRESHOLDS: dict[str, float] = {
    "small": 0.2,
    "medium": 0.5,
    "large": 0.8,
}

# ---------------------------------------------------------------------------
# Validation metrics
# ---------------------------------------------------------------------------

# Raters agree on a score when they differ by at most this many scale points.
RATER_AGREEMENT_TOLERANCE: float = 1.0

# Ordered high → low; first threshold met wins.
AGREEMENT_LABELS: list[tuple[float, str]] = [
    (0.8, "excellent"),
    (0.6, "good"),
    (0.4, "moderate"),
    (0.2, "fair"),
]

# Rating scale shared by raters and expert panels (1-7 Likert).
RATING_SCALE_MAX: float = 7.0

# Content validity of tactic definitions from expert panel ratings
CONTENT_VALID_MEAN: float = 5.0          # overall mean at or above → "valid"
CONTENT_QUESTIONABLE_MEAN: float = 4.0   # at or above → "questionable", else "invalid"
CONTENT_MAX_RELEVANCE_SE: float = 0.5    # wider spread flags an unclear construct
MIN_EXPERT_PANEL: int = 5

CONTENT_RECOMMENDATIONS: dict[str, str] = {
    "relevance": "Revise tactic definitions for better relevance to ethical reasoning",
    "clarity": "Improve clarity and specificity of tactic descriptions",
    "completeness": "Expand tactic coverage to capture additional ethical reasoning patterns",
}

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_FORMAT = "[%(levelname)s %(asctime)s] %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a console handler to the package logger (CLI use only)."""
    logger = logging.getLogger("tactic_inference")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
