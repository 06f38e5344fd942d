from .distribution import DistributionSource
from .text_file import TextFileSource

__all__ = ["DistributionSource", "TextFileSource"]
