from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Literal

import numpy as np
from numpy.typing import NDArray

from gaphist.contracts import SampleSource

logger = logging.getLogger(__name__)

Distribution = Literal["normal", "uniform"]
DISTRIBUTIONS: tuple[Distribution, ...] = ("normal", "uniform")


class DistributionSource(SampleSource):
    """Stream seeded random draws in fixed-size batches."""

    def __init__(
        self,
        distribution: Distribution = "normal",
        size: int = 1000,
        batch_size: int = 65536,
        seed: int | None = None,
        low: float = 0.0,
        high: float = 100.0,
    ) -> None:
        if distribution not in DISTRIBUTIONS:
            logger.error("Unknown distribution %r.", distribution)
            raise ValueError(f"Unknown distribution: {distribution}")
        if size < 0:
            logger.error("Invalid sample size %d.", size)
            raise ValueError("size must be non-negative.")
        if batch_size <= 0:
            logger.error("Invalid batch_size %d.", batch_size)
            raise ValueError("batch_size must be positive.")
        if distribution == "uniform" and not high > low:
            logger.error("Invalid uniform range low=%s high=%s.", low, high)
            raise ValueError("high must be greater than low.")
        self._distribution = distribution
        self._size = size
        self._batch_size = batch_size
        self._seed = seed
        self._low = low
        self._high = high

    def iter_batches(self) -> Iterator[NDArray[np.float64]]:
        rng = np.random.default_rng(self._seed)
        remaining = self._size
        logger.info(
            "Streaming %d %s samples (batch_size=%d).",
            self._size,
            self._distribution,
            self._batch_size,
        )
        while remaining > 0:
            step = min(remaining, self._batch_size)
            if self._distribution == "normal":
                batch = rng.standard_normal(step)
            else:
                batch = rng.uniform(self._low, self._high, step)
            remaining -= step
            yield batch
