from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gaphist.models import QuantileReport


class Reporter(ABC):
    """Render quantile reports for presentation."""

    @abstractmethod
    def render(self, report: QuantileReport, title: str) -> None:
        """Render the report to the configured output."""
        raise NotImplementedError
