"""
Shared pytest fixtures for the inference toolkit tests.

Score arrays mimic what the pattern-discovery stage hands over: per-response
tactic strengths in [0, 1], 0/1 indicator evidence, and a background
population baseline centred near 0.5.
"""

from __future__ import annotations

import numpy as np
import pytest


# ---------------------------------------------------------------------------
# Canonical samples
# ---------------------------------------------------------------------------

ONE_TO_TEN = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0]
# mean 5.5, unbiased variance 55/6 ≈ 9.1667

# Background population: mean 0.5, population variance 0.005
BASELINE = [0.5, 0.4, 0.6, 0.45, 0.55, 0.5, 0.4, 0.6, 0.45, 0.55]

# Evidence near the baseline mean vs. far above it
NEAR_BASELINE_EVIDENCE = [0.52, 0.48, 0.5, 0.51, 0.49]
FAR_EVIDENCE = [0.9, 0.95, 0.85, 0.9, 0.88]


@pytest.fixture
def one_to_ten():
    return list(ONE_TO_TEN)


@pytest.fixture
def baseline():
    return list(BASELINE)


@pytest.fixture
def rng():
    """Seeded generator; every test using it is deterministic."""
    return np.random.default_rng(20240601)


@pytest.fixture
def tactic_scores():
    """Four tactics: two with clear signal, one null, one under-sampled."""
    gen = np.random.default_rng(7)
    return {
        "harm_minimization": list(np.clip(gen.normal(0.8, 0.1, 30), 0, 1)),
        "rights_protection": list(np.clip(gen.normal(0.7, 0.15, 25), 0, 1)),
        "character_focus": list(gen.normal(0.0, 0.2, 20)),
        "relational_focus": [0.6, 0.7, 0.65],
    }

