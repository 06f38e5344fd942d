from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from gaphist.contracts import SampleSource
from gaphist.fit import (
    DEFAULT_FIT_POINTS,
    evenly_spaced_quantiles,
    exact_quantiles,
    r_squared,
)
from gaphist.histogram import DEFAULT_MAX_BINS, Histogram
from gaphist.models import QuantileReport

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES: tuple[float, ...] = (
    0.0,
    0.002,
    0.023,
    0.159,
    0.5,
    0.841,
    0.977,
    0.998,
    1.0,
)
"""Minimum, the -3 to +3 sigma points of a normal distribution, and maximum."""


class Analyzer:
    """Stream a sample source through a histogram and report its quantiles."""

    def __init__(
        self,
        source: SampleSource,
        histogram: Histogram | None = None,
        quantiles: Sequence[float] = DEFAULT_QUANTILES,
        keep_exact: bool = False,
        fit_points: int = DEFAULT_FIT_POINTS,
    ) -> None:
        self._source = source
        self._histogram = (
            histogram if histogram is not None else Histogram(DEFAULT_MAX_BINS)
        )
        self._quantiles = [float(q) for q in quantiles]
        self._keep_exact = keep_exact
        self._fit_points = fit_points

    @property
    def histogram(self) -> Histogram:
        return self._histogram

    def analyze(self) -> QuantileReport:
        retained: list[NDArray[np.float64]] = []
        batch_count = 0

        for batch in self._source.iter_batches():
            self._histogram.update_many(batch)
            if self._keep_exact:
                retained.append(np.array(batch, dtype=np.float64, copy=True))
            batch_count += 1

        if self._histogram.count == 0:
            logger.error("Source produced no observations.")
            raise ValueError("No observations provided for analysis.")
        logger.info(
            "Ingested %d observations in %d batches (bins=%d).",
            self._histogram.count,
            batch_count,
            self._histogram.bins,
        )

        approximate = self._histogram.query(self._quantiles)
        exact: list[float] | None = None
        score: float | None = None
        if self._keep_exact:
            sample = np.concatenate(retained)
            exact = exact_quantiles(sample, self._quantiles)
            score = self._fit(sample)

        return QuantileReport(
            quantiles=list(self._quantiles),
            approximate=approximate,
            exact=exact,
            r_squared=score,
            histogram=self._histogram.summary(),
        )

    def _fit(self, sample: NDArray[np.float64]) -> float | None:
        if sample.size < 2 or float(np.min(sample)) == float(np.max(sample)):
            logger.warning("Skipping fit: sample has no spread.")
            return None
        grid = evenly_spaced_quantiles(self._fit_points)
        # Compare against the sorted sample resampled onto the same grid.
        ordered = np.sort(sample)
        positions = np.linspace(0.0, 1.0, ordered.size)
        expected = np.interp(grid, positions, ordered)
        return r_squared(self._histogram.query(grid), expected)
