from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


class QuantileEstimator(ABC):
    """Consume a stream of observations and answer quantile queries."""

    @abstractmethod
    def update(self, observation: float) -> None:
        """Record a single finite observation."""
        raise NotImplementedError

    @abstractmethod
    def update_many(self, values: Iterable[float] | ArrayLike) -> None:
        """Record a batch of observations in order."""
        raise NotImplementedError

    @abstractmethod
    def query(self, quantiles: Iterable[float] | ArrayLike) -> list[float]:
        """Return one approximate value per requested quantile."""
        raise NotImplementedError
