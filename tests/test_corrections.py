"""
Unit tests for tactic_inference/corrections.py.

Covers:
- Bonferroni: scaling by m, cap at 1, length preserved.
- Benjamini-Hochberg: a worked example, ties, rank monotonicity, and the
  BH ≤ Bonferroni ordering over random families.
- Validation of p-values and the correct_p_values dispatcher.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from tactic_inference.corrections import (
    CORRECTION_METHODS,
    benjamini_hochberg_correction,
    bonferroni_correction,
    correct_p_values,
)
from tactic_inference.errors import DomainError


FAMILY = [0.01, 0.04, 0.03, 0.005]


# ---------------------------------------------------------------------------
# Class: Bonferroni
# ---------------------------------------------------------------------------

class TestBonferroni:

    def test_scales_by_family_size(self):
        assert bonferroni_correction(FAMILY) == pytest.approx([0.04, 0.16, 0.12, 0.02])

    def test_capped_at_one(self):
        assert bonferroni_correction([0.3, 0.6, 0.9]) == [pytest.approx(0.9), 1.0, 1.0]

    def test_never_below_raw(self):
        corrected = bonferroni_correction(FAMILY)
        assert all(c >= p for c, p in zip(corrected, FAMILY))

    def test_empty(self):
        assert bonferroni_correction([]) == []

    def test_returns_new_list(self):
        values = list(FAMILY)
        bonferroni_correction(values)
        assert values == FAMILY


# ---------------------------------------------------------------------------
# Class: Benjamini-Hochberg
# ---------------------------------------------------------------------------

class TestBenjaminiHochberg:

    def test_worked_example(self):
        # sorted: 0.005→0.02, 0.01→0.02, 0.03→0.04, 0.04→0.04
        adjusted = benjamini_hochberg_correction(FAMILY)
        assert adjusted == pytest.approx([0.02, 0.04, 0.04, 0.02])

    def test_preserves_input_order(self):
        adjusted = benjamini_hochberg_correction([0.04, 0.001])
        assert adjusted == pytest.approx([0.04, 0.002])

    def test_single_value_unchanged(self):
        assert benjamini_hochberg_correction([0.03]) == pytest.approx([0.03])

    def test_ties(self):
        assert benjamini_hochberg_correction([0.02, 0.02, 0.02]) == pytest.approx([0.02] * 3)

    def test_monotone_in_rank(self, rng):
        p = rng.uniform(0, 0.2, 25)
        adjusted = np.array(benjamini_hochberg_correction(p))
        in_rank_order = adjusted[np.argsort(p, kind="stable")]
        assert np.all(np.diff(in_rank_order) >= 0)

    def test_capped_at_one(self):
        assert max(benjamini_hochberg_correction([0.9, 0.95, 1.0])) <= 1.0

    def test_empty(self):
        assert benjamini_hochberg_correction([]) == []

    def test_between_raw_and_bonferroni(self, rng):
        for _ in range(50):
            p = rng.uniform(0, 1, int(rng.integers(1, 30)))
            bh = benjamini_hochberg_correction(p)
            bonf = bonferroni_correction(p)
            assert len(bh) == len(bonf) == len(p)
            for raw, b, f in zip(p, bh, bonf):
                assert raw - 1e-12 <= b <= f + 1e-12


# ---------------------------------------------------------------------------
# Class: validation and dispatch
# ---------------------------------------------------------------------------

class TestValidationAndDispatch:

    @pytest.mark.parametrize("bad", [[-0.1], [1.2], [0.5, math.nan]])
    @pytest.mark.parametrize("method", [bonferroni_correction, benjamini_hochberg_correction])
    def test_out_of_range_rejected(self, method, bad):
        with pytest.raises(DomainError):
            method(bad)

    def test_default_is_benjamini_hochberg(self):
        assert correct_p_values(FAMILY) == benjamini_hochberg_correction(FAMILY)

    @pytest.mark.parametrize("name", sorted(CORRECTION_METHODS))
    def test_dispatch_by_name(self, name):
        assert correct_p_values(FAMILY, method=name) == CORRECTION_METHODS[name](FAMILY)

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="holm"):
            correct_p_values(FAMILY, method="holm")
