"""
Tactic evidence report runner.

Annotates every discovered tactic with the toolkit's confidence measures
and exports them for the downstream report generator:

  1. Confidence interval and one-sample t-test of the tactic's scores
  2. Bayesian posterior against the population baseline
  3. Bootstrap interval of the mean score
  4. Power at the observed effect size
  5. Multiple-testing correction across all tactics

Usage (from project root):
    python -m tactic_inference.report path/to/evidence.json [output_dir]

where evidence.json holds ``{"tactic_scores": {name: [scores...]},
"population_baseline": [scores...], "prior_probability": 0.5}``.

Or programmatically:
    from tactic_inference.report import run_tactic_evidence_report
    results = run_tactic_evidence_report(tactic_scores, baseline)
"""

from __future__ import annotations

import json
import logging
import math
import sys
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np
import pandas as pd

from .bayesian import calculate_bayesian_tactic_probability
from .config import (
    ALPHA,
    DEFAULT_POWER,
    MIN_SAMPLE_SIZE,
    PLANNED_EFFECT_SIZE,
    RESULTS_DIR,
    setup_logging,
)
from .corrections import correct_p_values
from .errors import InsufficientSampleSizeError
from .intervals import calculate_confidence_interval
from .power import (
    calculate_required_sample_size,
    calculate_statistical_power,
    interpret_cohens_d,
    is_power_target_unreachable,
)
from .resampling import RandomSource, bootstrap_confidence_interval, make_rng

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Per-tactic analysis
# ---------------------------------------------------------------------------

def analyze_tactic(
    scores: Sequence[float],
    population_baseline: Sequence[float],
    prior_probability: float,
    rng: RandomSource = None,
) -> dict:
    """
    Every confidence measure for one tactic's scores.

    Raises:
        InsufficientSampleSizeError: if fewer than MIN_SAMPLE_SIZE scores.
    """
    evidence = calculate_confidence_interval(scores)
    bayesian = calculate_bayesian_tactic_probability(
        scores, prior_probability, population_baseline
    )
    boot_lo, boot_hi = bootstrap_confidence_interval(scores, np.mean, rng=rng)

    # Zero-variance scores give an infinite effect size; exports carry None
    # plus a flag instead so the JSON stays strict.
    evidence_dict = evidence.to_dict()
    effect_size_defined = math.isfinite(evidence.effect_size)
    if effect_size_defined:
        power = calculate_statistical_power(abs(evidence.effect_size), evidence.observations)
    else:
        logger.warning(
            "Effect size undefined for zero-variance scores (mean %.4g)", evidence.mean
        )
        evidence_dict["effect_size"] = None
        power = None

    return {
        "evidence": evidence_dict,
        "bayesian": bayesian.to_dict(),
        "bootstrap_ci": [boot_lo, boot_hi],
        "observed_power": power,
        "effect_size_defined": effect_size_defined,
        "effect_magnitude": interpret_cohens_d(evidence.effect_size),
    }


def _rounded(value: float | None, digits: int = 4) -> float | None:
    return None if value is None else round(value, digits)


def _summary_row(tactic: str, result: dict) -> dict:
    evidence = result["evidence"]
    bayesian = result["bayesian"]
    return {
        "tactic": tactic,
        "n": evidence["observations"],
        "mean": round(evidence["mean"], 4),
        "ci_lower": round(evidence["confidence_interval"][0], 4),
        "ci_upper": round(evidence["confidence_interval"][1], 4),
        "p_value": evidence["p_value"],
        "p_adjusted": result["p_adjusted"],
        "significant_adjusted": result["significant_adjusted"],
        "effect_size": evidence["effect_size"],
        "effect_magnitude": result["effect_magnitude"],
        "posterior": round(bayesian["posterior"], 4),
        "bayes_factor": round(bayesian["bayes_factor"], 4),
        "observed_power": _rounded(result["observed_power"]),
    }


# ---------------------------------------------------------------------------
# Master runner
# ---------------------------------------------------------------------------

def run_tactic_evidence_report(
    tactic_scores: Mapping[str, Sequence[float]],
    population_baseline: Sequence[float],
    prior_probability: float = 0.5,
    correction: str = "benjamini_hochberg",
    output_dir: Path | None = RESULTS_DIR,
    rng: RandomSource = None,
) -> dict:
    """
    Analyze every tactic, correct p-values as one family, and export.

    Tactics with fewer than MIN_SAMPLE_SIZE scores are listed under
    ``skipped`` instead of aborting the batch.  Each tactic's bootstrap gets
    its own child generator, so results are reproducible for a fixed seed.

    Args:
        tactic_scores: Tactic name → per-response scores.
        population_baseline: Background scores for the Bayesian likelihood.
        prior_probability: Prior belief that any given tactic is present.
        correction: ``'benjamini_hochberg'`` or ``'bonferroni'``.
        output_dir: Directory for JSON/CSV output; None skips export.
        rng: Seed or Generator.

    Returns:
        Dict with keys tactics, skipped, summary (DataFrame), correction,
        recommended_sample_size, recommendation_unreachable.
    """
    sep = "=" * 70
    print(f"\n{sep}")
    print("TACTIC EVIDENCE REPORT")
    print(sep)

    names = list(tactic_scores)
    children = make_rng(rng).spawn(len(names)) if names else []

    tactics: dict[str, dict] = {}
    skipped: dict[str, str] = {}
    for name, child in zip(names, children):
        try:
            tactics[name] = analyze_tactic(
                tactic_scores[name], population_baseline, prior_probability, rng=child
            )
        except InsufficientSampleSizeError as exc:
            skipped[name] = str(exc)
            logger.info("Skipping tactic %s: %s", name, exc)
            print(f"  {name}: skipped ({exc})")

    raw_p = [tactics[name]["evidence"]["p_value"] for name in tactics]
    adjusted = correct_p_values(raw_p, method=correction)
    for name, p_adj in zip(tactics, adjusted):
        tactics[name]["p_adjusted"] = p_adj
        tactics[name]["significant_adjusted"] = p_adj < ALPHA

    recommended_n = calculate_required_sample_size(PLANNED_EFFECT_SIZE, DEFAULT_POWER)
    summary = pd.DataFrame([_summary_row(name, res) for name, res in tactics.items()])

    print(f"\n--- {len(tactics)} tactics analyzed, {len(skipped)} skipped "
          f"(minimum n = {MIN_SAMPLE_SIZE}) ---")
    for row in summary.to_dict("records"):
        d = row["effect_size"]
        d_text = "n/a" if d is None or pd.isna(d) else f"{d:.2f}"
        print(f"  {row['tactic']}: mean={row['mean']:.3f} "
              f"[{row['ci_lower']:.3f}, {row['ci_upper']:.3f}], "
              f"p_adj={row['p_adjusted']:.4g}, posterior={row['posterior']:.3f}, "
              f"d={d_text} ({row['effect_magnitude']})")
    print(f"  Recommended n for d={PLANNED_EFFECT_SIZE}, power={DEFAULT_POWER}: "
          f"{recommended_n}")

    results = {
        "tactics": tactics,
        "skipped": skipped,
        "summary": summary,
        "correction": correction,
        "recommended_sample_size": recommended_n,
        "recommendation_unreachable": is_power_target_unreachable(recommended_n),
    }

    if output_dir is not None:
        export_tactic_evidence(results, output_dir)
    return results


def _json_default(obj):
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, pd.DataFrame):
        return obj.to_dict("records")
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def export_tactic_evidence(results: dict, output_dir: Path = RESULTS_DIR) -> tuple[Path, Path]:
    """Write tactic_evidence.json and tactic_evidence_summary.csv."""
    output_dir.mkdir(parents=True, exist_ok=True)

    json_path = output_dir / "tactic_evidence.json"
    payload = {k: v for k, v in results.items() if k != "summary"}
    with json_path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, default=_json_default, allow_nan=False)

    csv_path = output_dir / "tactic_evidence_summary.csv"
    results["summary"].to_csv(csv_path, index=False)

    print(f"\nExported tactic evidence to {json_path} and {csv_path.name}")
    return json_path, csv_path


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) not in (1, 2):
        print("usage: python -m tactic_inference.report <evidence.json> [output_dir]")
        return 2

    setup_logging()
    path = Path(argv[0])
    if not path.exists():
        print(f"ERROR: evidence file not found at {path}")
        return 1
    with path.open(encoding="utf-8") as fh:
        payload = json.load(fh)

    run_tactic_evidence_report(
        payload["tactic_scores"],
        payload["population_baseline"],
        prior_probability=payload.get("prior_probability", 0.5),
        correction=payload.get("correction", "benjamini_hochberg"),
        output_dir=Path(argv[1]) if len(argv) == 2 else RESULTS_DIR,
        rng=payload.get("seed"),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
