from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Bin(BaseModel):
    """A single histogram bin."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    centroid: float
    count: int = Field(ge=0)


class HistogramSummary(BaseModel):
    """Point-in-time snapshot of a histogram's bins and extremes."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    max_bins: int = Field(ge=1)
    bins: int = Field(ge=0)
    count: int = Field(ge=0)
    min: float
    max: float
    bin_list: list[Bin]


class QuantileReport(BaseModel):
    """Approximate quantiles, optionally paired with exact ones."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    quantiles: list[float]
    approximate: list[float]
    exact: list[float] | None = None
    r_squared: float | None = None
    histogram: HistogramSummary
