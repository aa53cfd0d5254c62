"""
Unit tests for tactic_inference/report.py.

Covers:
- run_tactic_evidence_report: per-tactic measures, skipped tactics,
  family-wise p-value adjustment, sample-size recommendation, seeding.
- export_tactic_evidence: JSON and CSV output, strict JSON only.
- Zero-variance tactics: undefined effect size exported as None plus a flag.
- main: usage errors, missing input, a full CLI run into a temp directory.
"""

from __future__ import annotations

import json
import math

import numpy as np
import pandas as pd
import pytest

from tactic_inference.report import export_tactic_evidence, main, run_tactic_evidence_report

from conftest import BASELINE


# ---------------------------------------------------------------------------
# Class: run_tactic_evidence_report
# ---------------------------------------------------------------------------

class TestRunTacticEvidenceReport:

    def test_under_sampled_tactic_is_skipped(self, tactic_scores, baseline):
        results = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        assert set(results["tactics"]) == {"harm_minimization", "rights_protection", "character_focus"}
        assert "relational_focus" in results["skipped"]
        assert "3 < 10" in results["skipped"]["relational_focus"]

    def test_per_tactic_measures(self, tactic_scores, baseline):
        results = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        harm = results["tactics"]["harm_minimization"]
        assert harm["evidence"]["observations"] == 30
        lo, hi = harm["bootstrap_ci"]
        assert lo <= harm["evidence"]["mean"] <= hi
        assert 0.0 <= harm["observed_power"] <= 1.0
        assert harm["effect_magnitude"] == "large"
        assert 0.0 <= harm["bayesian"]["posterior"] <= 1.0

    def test_adjusted_p_values(self, tactic_scores, baseline):
        results = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        for tactic in results["tactics"].values():
            assert tactic["p_adjusted"] >= tactic["evidence"]["p_value"]
            assert tactic["significant_adjusted"] == (tactic["p_adjusted"] < 0.05)
        assert results["tactics"]["harm_minimization"]["significant_adjusted"]
        assert results["correction"] == "benjamini_hochberg"

    def test_bonferroni_at_least_as_strict(self, tactic_scores, baseline):
        bh = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        bonf = run_tactic_evidence_report(
            tactic_scores, baseline, correction="bonferroni", output_dir=None, rng=11
        )
        for name in bh["tactics"]:
            assert bonf["tactics"][name]["p_adjusted"] >= bh["tactics"][name]["p_adjusted"] - 1e-15

    def test_sample_size_recommendation(self, tactic_scores, baseline):
        results = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        assert 3 <= results["recommended_sample_size"] < 100
        assert results["recommendation_unreachable"] is False

    def test_summary_frame(self, tactic_scores, baseline):
        summary = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)["summary"]
        assert isinstance(summary, pd.DataFrame)
        assert len(summary) == 3
        assert {"tactic", "mean", "p_adjusted", "posterior", "effect_magnitude"} <= set(summary.columns)

    def test_same_seed_same_bootstrap(self, tactic_scores, baseline):
        first = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        second = run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        for name in first["tactics"]:
            assert first["tactics"][name]["bootstrap_ci"] == second["tactics"][name]["bootstrap_ci"]

    def test_all_tactics_skipped(self, baseline):
        results = run_tactic_evidence_report({"a": [0.5], "b": [0.1, 0.2]}, baseline, output_dir=None)
        assert results["tactics"] == {}
        assert set(results["skipped"]) == {"a", "b"}
        assert results["summary"].empty

    def test_prints_banner(self, tactic_scores, baseline, capsys):
        run_tactic_evidence_report(tactic_scores, baseline, output_dir=None, rng=11)
        out = capsys.readouterr().out
        assert "TACTIC EVIDENCE REPORT" in out
        assert "relational_focus: skipped" in out
        assert "Exported" not in out

    def test_unknown_correction(self, tactic_scores, baseline):
        with pytest.raises(ValueError):
            run_tactic_evidence_report(
                tactic_scores, baseline, correction="holm", output_dir=None, rng=11
            )


# ---------------------------------------------------------------------------
# Class: export
# ---------------------------------------------------------------------------

class TestExport:

    def test_writes_json_and_csv(self, tactic_scores, baseline, tmp_path):
        run_tactic_evidence_report(tactic_scores, baseline, output_dir=tmp_path, rng=11)

        with (tmp_path / "tactic_evidence.json").open(encoding="utf-8") as fh:
            payload = json.load(fh)
        assert "summary" not in payload
        assert set(payload["tactics"]) == {"harm_minimization", "rights_protection", "character_focus"}
        assert isinstance(payload["recommended_sample_size"], int)

        summary = pd.read_csv(tmp_path / "tactic_evidence_summary.csv")
        assert sorted(summary["tactic"]) == ["character_focus", "harm_minimization", "rights_protection"]

    def test_creates_output_dir(self, tactic_scores, baseline, tmp_path):
        target = tmp_path / "nested" / "results"
        run_tactic_evidence_report(tactic_scores, baseline, output_dir=target, rng=11)
        assert (target / "tactic_evidence.json").exists()


# ---------------------------------------------------------------------------
# Class: CLI
# ---------------------------------------------------------------------------

class TestMain:

    def test_usage_error(self, capsys):
        assert main([]) == 2
        assert "usage" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "absent.json")]) == 1
        assert "not found" in capsys.readouterr().out

    def test_full_run(self, tactic_scores, tmp_path):
        evidence = tmp_path / "evidence.json"
        evidence.write_text(json.dumps({
            "tactic_scores": {k: [float(v) for v in vals] for k, vals in tactic_scores.items()},
            "population_baseline": BASELINE,
            "prior_probability": 0.3,
            "correction": "bonferroni",
            "seed": 4,
        }), encoding="utf-8")
        out_dir = tmp_path / "out"

        assert main([str(evidence), str(out_dir)]) == 0
        payload = json.loads((out_dir / "tactic_evidence.json").read_text(encoding="utf-8"))
        assert payload["correction"] == "bonferroni"
        assert payload["tactics"]["harm_minimization"]["bayesian"]["prior"] == 0.3


# ---------------------------------------------------------------------------
# Class: zero-variance tactics
# ---------------------------------------------------------------------------

def _reject_constant(token):
    raise ValueError(f"non-strict JSON constant: {token}")


class TestZeroVarianceTactic:

    def test_undefined_effect_size_is_flagged(self, tactic_scores, baseline):
        scores = dict(tactic_scores, always_present=[1.0] * 12)
        results = run_tactic_evidence_report(scores, baseline, output_dir=None, rng=1)

        constant = results["tactics"]["always_present"]
        assert constant["evidence"]["effect_size"] is None
        assert constant["effect_size_defined"] is False
        assert constant["effect_magnitude"] == "undefined"
        assert constant["observed_power"] is None
        assert constant["bootstrap_ci"] == [1.0, 1.0]

        harm = results["tactics"]["harm_minimization"]
        assert harm["effect_size_defined"] is True
        assert math.isfinite(harm["evidence"]["effect_size"])

    def test_exports_strict_json_and_finite_csv(self, baseline, tmp_path, capsys):
        run_tactic_evidence_report(
            {"always_present": [1.0] * 12}, baseline, output_dir=tmp_path, rng=1
        )

        text = (tmp_path / "tactic_evidence.json").read_text(encoding="utf-8")
        payload = json.loads(text, parse_constant=_reject_constant)
        assert payload["tactics"]["always_present"]["effect_size_defined"] is False

        summary = pd.read_csv(tmp_path / "tactic_evidence_summary.csv")
        assert summary["effect_size"].isna().all()
        numeric = summary.select_dtypes("number").to_numpy(dtype=float)
        assert not np.isinf(numeric).any()
        assert "d=n/a (undefined)" in capsys.readouterr().out

    def test_export_refuses_non_finite_values(self, tmp_path):
        results = {"tactics": {"broken": {"effect_size": math.inf}}, "summary": pd.DataFrame()}
        with pytest.raises(ValueError):
            export_tactic_evidence(results, tmp_path)
