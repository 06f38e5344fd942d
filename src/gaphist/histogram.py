from __future__ import annotations

import logging
import math
from array import array
from collections.abc import Iterable, Iterator

import numpy as np
from numpy.typing import ArrayLike

from gaphist.contracts import QuantileEstimator
from gaphist.models import Bin, HistogramSummary

logger = logging.getLogger(__name__)

DEFAULT_MAX_BINS = 100


class Histogram(QuantileEstimator):
    """Approximate histogram in constant space (Ben-Haim & Yom-Tov).

    Bins live in two contiguous arrays ordered by centroid. One slot in the
    active region ``[0, bins]`` is an insertion gap: new observations are
    written there after walking the gap to its sorted position, and after a
    merge the gap is left where the merged pair used to start. For smooth
    input the gap is usually close to where the next observation belongs, so
    an update shifts far fewer than ``bins`` entries on average.
    """

    def __init__(self, max_bins: int = DEFAULT_MAX_BINS) -> None:
        if isinstance(max_bins, bool) or not isinstance(max_bins, int):
            logger.error("Invalid max_bins %r.", max_bins)
            raise TypeError("max_bins must be an integer.")
        if max_bins < 1:
            logger.error("Invalid max_bins %d.", max_bins)
            raise ValueError("max_bins must be positive.")

        self._max_bins = max_bins
        self._centroids = array("d", [0.0] * (max_bins + 1))
        self._counts = array("q", [0] * (max_bins + 1))
        self._bins = 0
        self._gap = 0
        self._count = 0
        self._min = math.inf
        self._max = -math.inf
        logger.debug("Created histogram with max_bins=%d.", max_bins)

    @property
    def max_bins(self) -> int:
        return self._max_bins

    @property
    def bins(self) -> int:
        return self._bins

    @property
    def count(self) -> int:
        return self._count

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    def __len__(self) -> int:
        return self._bins

    def update(self, observation: float) -> None:
        value = float(observation)
        if not math.isfinite(value):
            logger.error("Non-finite observation %r.", observation)
            raise ValueError("Observation must be finite.")
        self._insert(value)

    def update_many(self, values: Iterable[float] | ArrayLike) -> None:
        """Record every value of a batch, in order.

        The batch is checked as a whole first, so a batch containing NaN or
        infinity leaves the histogram untouched.
        """
        batch = _as_vector(values)
        if batch.size == 0:
            return
        if not bool(np.all(np.isfinite(batch))):
            logger.error("Non-finite value encountered in batch update.")
            raise ValueError("Non-finite value encountered in batch update.")
        for entry in batch.tolist():
            self._insert(entry)
        logger.debug(
            "Recorded batch of %d values count=%d bins=%d.",
            batch.size,
            self._count,
            self._bins,
        )

    def _insert(self, observation: float) -> None:
        centroids = self._centroids
        counts = self._counts

        self._count += 1
        if observation < self._min:
            self._min = observation
        if observation > self._max:
            self._max = observation

        # Walk the gap to the observation's sorted position. A bin whose
        # centroid equals the observation absorbs it in place.
        gap = self._gap
        bins = self._bins
        while True:
            if gap != 0:
                left = centroids[gap - 1]
                if left > observation:
                    centroids[gap] = left
                    counts[gap] = counts[gap - 1]
                    gap -= 1
                    continue
                if left == observation:
                    counts[gap - 1] += 1
                    self._gap = gap
                    return

            if gap != bins:
                right = centroids[gap + 1]
                if right < observation:
                    centroids[gap] = right
                    counts[gap] = counts[gap + 1]
                    gap += 1
                    continue
                if right == observation:
                    counts[gap + 1] += 1
                    self._gap = gap
                    return

            break

        centroids[gap] = observation
        counts[gap] = 1

        if bins != self._max_bins:
            self._bins = bins + 1
            self._gap = self._bins
            return

        # Full: merge the closest adjacent pair into its right-hand slot.
        # Strict comparison keeps the leftmost pair on ties.
        min_delta = math.inf
        for index in range(bins):
            delta = centroids[index + 1] - centroids[index]
            if delta < min_delta:
                gap = index
                min_delta = delta

        left_count = counts[gap]
        right_count = counts[gap + 1]
        merged_count = left_count + right_count
        centroids[gap + 1] = (
            centroids[gap] * left_count + centroids[gap + 1] * right_count
        ) / merged_count
        counts[gap + 1] = merged_count
        self._gap = gap

    def query(self, quantiles: Iterable[float] | ArrayLike) -> list[float]:
        """Return the approximate value at each quantile.

        Quantiles must be non-decreasing; they are answered in one forward
        sweep over the bins. Values at or below 0 return ``min`` and values
        at or above 1 return ``max``.
        """
        requested = self._validate_quantiles(quantiles)
        results: list[float] = []

        centroids = self._centroids
        counts = self._counts
        bins = self._bins
        gap = self._gap
        count = self._count

        lhs = -1
        lhs_total = 0
        rhs_total = 0
        lhs_centroid = math.nan
        rhs_centroid = math.nan
        lhs_count = 0
        rhs_count = 0

        for quantile in requested:
            if quantile <= 0.0:
                results.append(self._min)
                continue
            if quantile >= 1.0:
                results.append(self._max)
                continue
            if count == 0:
                logger.error("Quantile %s requested from empty histogram.", quantile)
                raise ValueError("No observations recorded.")

            needle = count * quantile

            while rhs_total < needle:
                rhs = lhs + 1
                if rhs == gap:
                    rhs += 1

                if lhs < 0:
                    lhs_centroid = self._min
                    lhs_count = 0
                else:
                    lhs_centroid = centroids[lhs]
                    lhs_count = counts[lhs]

                if rhs > bins:
                    rhs_centroid = self._max
                    rhs_count = 0
                else:
                    rhs_centroid = centroids[rhs]
                    rhs_count = counts[rhs]

                # Half of each endpoint's count belongs to this bin; rounding
                # the left half down and the right half up makes the areas
                # sum to the total count.
                lhs_total = rhs_total
                rhs_total += lhs_count // 2 + (rhs_count + 1) // 2
                lhs = rhs

            results.append(
                _interpolate(
                    needle,
                    lhs_centroid,
                    rhs_centroid,
                    lhs_count,
                    rhs_count,
                    lhs_total,
                    rhs_total,
                )
            )

        return results

    def quantile(self, q: float) -> float:
        return self.query([q])[0]

    @staticmethod
    def _validate_quantiles(quantiles: Iterable[float] | ArrayLike) -> list[float]:
        values = _as_vector(quantiles).tolist()
        previous = -math.inf
        for q in values:
            if math.isnan(q):
                logger.error("NaN quantile requested.")
                raise ValueError("Quantiles must not be NaN.")
            if q < previous:
                logger.error("Quantiles out of order: %s after %s.", q, previous)
                raise ValueError("Quantiles must be in non-decreasing order.")
            previous = q
        return values

    def iter_bins(self) -> Iterator[tuple[float, int]]:
        """Yield active ``(centroid, count)`` pairs, skipping the gap."""
        for index in range(self._bins + 1):
            if index != self._gap:
                yield self._centroids[index], self._counts[index]

    def summary(self) -> HistogramSummary:
        return HistogramSummary(
            max_bins=self._max_bins,
            bins=self._bins,
            count=self._count,
            min=self._min,
            max=self._max,
            bin_list=[
                Bin(centroid=centroid, count=count)
                for centroid, count in self.iter_bins()
            ],
        )

    def __repr__(self) -> str:
        return (
            f"Histogram(max_bins={self._max_bins}, bins={self._bins}, "
            f"count={self._count})"
        )

    def __str__(self) -> str:
        lines = ["Histogram {"]
        for centroid, count in self.iter_bins():
            lines.append(f"  {centroid!r}: {count}")
        lines.append("}")
        return "\n".join(lines)


def _interpolate(
    needle: float,
    lhs_centroid: float,
    rhs_centroid: float,
    lhs_count: int,
    rhs_count: int,
    lhs_total: int,
    rhs_total: int,
) -> float:
    a = float(rhs_count - lhs_count)
    if a == 0.0:
        span = float(rhs_total - lhs_total)
        z = 0.0 if span == 0.0 else (needle - lhs_total) / span
    else:
        # Density varies linearly across the bin; take the positive root.
        # Half-count rounding can push the discriminant below zero near the
        # right edge; it is floored at zero, which puts z past 1 there.
        b = 2.0 * lhs_count
        c = 2.0 * (lhs_total - needle)
        discriminant = max(b * b - 4.0 * a * c, 0.0)
        z = (-b + math.sqrt(discriminant)) / (2.0 * a)
    return lhs_centroid + (rhs_centroid - lhs_centroid) * z


def _as_vector(values: Iterable[float] | ArrayLike) -> np.ndarray:
    if not isinstance(values, np.ndarray):
        values = list(values)  # type: ignore[arg-type]
    return np.asarray(values, dtype=np.float64).reshape(-1)
