from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray


class SampleSource(ABC):
    """Stream observations as numeric batches."""

    @abstractmethod
    def iter_batches(self) -> Iterator[NDArray[np.float64]]:
        """Yield 1-D batches of observations in a streaming fashion."""
        raise NotImplementedError
