from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)

DEFAULT_FIT_POINTS = 1000


def evenly_spaced_quantiles(points: int = DEFAULT_FIT_POINTS) -> list[float]:
    """Return ``points`` quantiles from 0 to 1 inclusive."""
    if points < 2:
        logger.error("Invalid fit point count %d.", points)
        raise ValueError("points must be at least 2.")
    return [index / (points - 1) for index in range(points)]


def exact_quantiles(
    sample: ArrayLike, quantiles: Sequence[float]
) -> list[float]:
    """Pick order statistics of ``sample`` at rank ``round(q * (n - 1))``."""
    ordered: NDArray[np.float64] = np.sort(np.asarray(sample, dtype=np.float64).reshape(-1))
    if ordered.size == 0:
        logger.error("Exact quantiles requested for an empty sample.")
        raise ValueError("No samples provided for quantile estimation.")
    last = ordered.size - 1
    ranks = [min(max(int(round(q * last)), 0), last) for q in quantiles]
    return [float(ordered[rank]) for rank in ranks]


def r_squared(actual: ArrayLike, expected: ArrayLike) -> float:
    """Coefficient of determination of ``actual`` against ``expected``."""
    predicted = np.asarray(actual, dtype=np.float64).reshape(-1)
    observed = np.asarray(expected, dtype=np.float64).reshape(-1)
    if predicted.size != observed.size:
        logger.error(
            "Length mismatch in fit: actual=%d expected=%d.",
            predicted.size,
            observed.size,
        )
        raise ValueError("actual and expected must have the same length.")
    if observed.size == 0:
        logger.error("Fit requested on empty input.")
        raise ValueError("No values provided for fit.")

    residual = float(np.sum((observed - predicted) ** 2))
    total = float(np.sum((observed - np.mean(observed)) ** 2))
    if total == 0.0:
        logger.error("Expected values have zero variance.")
        raise ValueError("expected values must not all be equal.")
    score = 1.0 - residual / total
    logger.debug("Computed r_squared=%.6f over %d points.", score, observed.size)
    return score
