"""
Resampling: bootstrap confidence intervals and k-fold cross-validation.

All randomness flows through an explicit ``numpy.random.Generator`` (pass a
seed, a Generator, or None for fresh OS entropy).  The same seed with the
same inputs always reproduces the same result.

Both procedures are embarrassingly parallel.  With ``n_jobs > 1`` the work
units run on a thread pool; bootstrap chunks each get an independently
spawned child generator, and the reduction (sort / mean / std) runs only
after every unit has finished, so completion order never matters.  Chunk
boundaries do not depend on ``n_jobs``, so serial and parallel runs with the
same seed agree exactly.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterator, Sequence, TypeVar, Union

import numpy as np
from numpy.random import Generator

from .config import BOOTSTRAP_CHUNK_SIZE, CONFIDENCE_LEVEL, DEFAULT_BOOTSTRAP_ITERATIONS, MIN_FOLDS
from .errors import DomainError, InsufficientSampleSizeError, InvalidFoldCountError
from .records import CrossValidationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")
RandomSource = Union[None, int, np.random.SeedSequence, Generator]


def make_rng(random_source: RandomSource = None) -> Generator:
    """Normalize a seed / Generator / None into a Generator."""
    return np.random.default_rng(random_source)


def _map(fn: Callable, items: list, n_jobs: int) -> list:
    """Ordered map, on a thread pool when n_jobs > 1."""
    if n_jobs <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=n_jobs) as pool:
        return list(pool.map(fn, items))


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------

def bootstrap_sample(data: Sequence[float], rng: RandomSource = None) -> np.ndarray:
    """Draw a same-size sample with replacement.  ``data`` is not modified."""
    values = np.array(data, dtype=float)
    if values.size == 0:
        raise InsufficientSampleSizeError(0, 1)
    generator = make_rng(rng)
    return values[generator.integers(0, values.size, size=values.size)]


def _bootstrap_chunk(
    values: np.ndarray,
    statistic: Callable[[np.ndarray], float],
    size: int,
    rng: Generator,
) -> list[float]:
    indices = rng.integers(0, values.size, size=(size, values.size))
    # Fancy indexing copies, so the statistic can never touch the caller's data
    return [float(statistic(values[row])) for row in indices]


def bootstrap_confidence_interval(
    data: Sequence[float],
    statistic: Callable[[np.ndarray], float],
    iterations: int = DEFAULT_BOOTSTRAP_ITERATIONS,
    confidence_level: float = CONFIDENCE_LEVEL,
    rng: RandomSource = None,
    n_jobs: int = 1,
) -> tuple[float, float]:
    """
    Percentile bootstrap confidence interval for an arbitrary statistic.

    Draws ``iterations`` same-size resamples with replacement, evaluates
    ``statistic`` on each, sorts the results and reads the bounds at
    indices floor(α/2·B) and floor((1 − α/2)·B) (the latter capped at B − 1).

    Args:
        data: Numeric sample (not modified).
        statistic: Function of a 1-D float array returning a scalar.
        iterations: Number of resamples B.
        confidence_level: Interval coverage, strictly between 0 and 1.
        rng: Seed or Generator for reproducible draws.
        n_jobs: Worker threads; 1 runs serially.

    Returns:
        Tuple of (lower_bound, upper_bound).
    """
    values = np.array(data, dtype=float)
    if values.size == 0:
        raise InsufficientSampleSizeError(0, 1)
    if iterations < 1:
        raise DomainError(f"iterations must be positive, got {iterations}")
    if not 0.0 < confidence_level < 1.0:
        raise DomainError(
            f"Confidence level must be between 0 and 1, got {confidence_level}"
        )

    n_chunks = math.ceil(iterations / BOOTSTRAP_CHUNK_SIZE)
    sizes = [BOOTSTRAP_CHUNK_SIZE] * (n_chunks - 1)
    sizes.append(iterations - BOOTSTRAP_CHUNK_SIZE * (n_chunks - 1))
    children = make_rng(rng).spawn(n_chunks)

    chunks = _map(
        lambda unit: _bootstrap_chunk(values, statistic, unit[0], unit[1]),
        list(zip(sizes, children)),
        n_jobs,
    )
    statistics = np.sort(np.concatenate([np.asarray(c, dtype=float) for c in chunks]))

    alpha = 1.0 - confidence_level
    lower_index = int(math.floor(alpha / 2.0 * iterations))
    upper_index = min(int(math.floor((1.0 - alpha / 2.0) * iterations)), iterations - 1)

    logger.debug(
        "Bootstrap: n=%d, B=%d, chunks=%d, n_jobs=%d", values.size, iterations, n_chunks, n_jobs
    )
    return (float(statistics[lower_index]), float(statistics[upper_index]))


# ---------------------------------------------------------------------------
# K-fold cross-validation
# ---------------------------------------------------------------------------

def kfold_indices(
    n: int,
    k: int,
    rng: RandomSource = None,
) -> Iterator[tuple[np.ndarray, np.ndarray]]:
    """
    Yield (train_indices, test_indices) for each of ``k`` folds.

    Indices are shuffled once, then cut into k contiguous folds of size
    ⌊n/k⌋; the last fold absorbs the remainder.  Train and test sets are
    disjoint for every fold and each index is tested exactly once.

    Raises:
        InvalidFoldCountError: if k < 2 or k > n (at call time, not on
            first iteration).
    """
    if k < MIN_FOLDS or k > n:
        raise InvalidFoldCountError(k, n)
    return _iter_folds(make_rng(rng).permutation(n), k)


def _iter_folds(permutation: np.ndarray, k: int) -> Iterator[tuple[np.ndarray, np.ndarray]]:
    n = permutation.size
    fold_size = n // k
    for i in range(k):
        start = i * fold_size
        end = n if i == k - 1 else (i + 1) * fold_size
        test_idx = permutation[start:end]
        train_idx = np.concatenate([permutation[:start], permutation[end:]])
        yield train_idx, test_idx


def k_fold_cross_validation(
    data: Sequence[T],
    k: int,
    train: Callable[[list[T]], Any],
    test: Callable[[Any, list[T]], float],
    rng: RandomSource = None,
    n_jobs: int = 1,
) -> CrossValidationResult:
    """
    K-fold cross-validation over caller-supplied train/test procedures.

    Args:
        data: Records of any type (not modified; folds receive new lists).
        k: Number of folds, 2 ≤ k ≤ len(data).
        train: ``train(train_data) -> model``.
        test: ``test(model, test_data) -> score``.
        rng: Seed or Generator for the single shuffle.
        n_jobs: Worker threads; 1 runs serially.

    Returns:
        CrossValidationResult with the mean and population standard
        deviation of the k fold scores, plus the scores in fold order.

    Raises:
        InvalidFoldCountError: if k < 2 or k > len(data).
    """
    records = list(data)
    splits = list(kfold_indices(len(records), k, rng))

    def _run_fold(split: tuple[np.ndarray, np.ndarray]) -> float:
        train_idx, test_idx = split
        model = train([records[i] for i in train_idx])
        return float(test(model, [records[i] for i in test_idx]))

    scores = np.asarray(_map(_run_fold, splits, n_jobs), dtype=float)
    result = CrossValidationResult(
        mean=float(scores.mean()),
        std=float(scores.std(ddof=0)),
        folds=tuple(scores.tolist()),
    )
    logger.debug("Cross-validation: k=%d mean=%.4f std=%.4f", k, result.mean, result.std)
    return result
