import logging
import sys

from .contracts import QuantileEstimator, Reporter, SampleSource
from .histogram import Histogram

__all__ = [
    "Histogram",
    "QuantileEstimator",
    "Reporter",
    "SampleSource",
]

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,
)
