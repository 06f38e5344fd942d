from .quantile_estimator import QuantileEstimator
from .reporter import Reporter
from .sample_source import SampleSource

__all__ = [
    "QuantileEstimator",
    "Reporter",
    "SampleSource",
]
