from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

import numpy as np
from numpy.typing import NDArray

from gaphist.contracts import SampleSource

logger = logging.getLogger(__name__)


class TextFileSource(SampleSource):
    """Stream whitespace-separated numbers from a text file or stdin.

    ``"-"`` reads standard input. Each line becomes one batch.
    """

    def __init__(self, path: str | Path, stream: TextIO | None = None) -> None:
        self._path = str(path)
        self._stream = stream

    def iter_batches(self) -> Iterator[NDArray[np.float64]]:
        if self._path == "-":
            yield from self._parse(self._stream or sys.stdin, "<stdin>")
            return

        path = Path(self._path)
        if not path.is_file():
            logger.error("Input file %s not found.", path)
            raise FileNotFoundError(f"Input file not found: {path}")
        with path.open() as handle:
            yield from self._parse(handle, str(path))

    @staticmethod
    def _parse(handle: TextIO, name: str) -> Iterator[NDArray[np.float64]]:
        for line_number, line in enumerate(handle, start=1):
            tokens = line.split()
            if not tokens:
                continue
            values: list[float] = []
            for token in tokens:
                try:
                    values.append(float(token))
                except ValueError:
                    logger.error(
                        "Unparsable token %r at %s:%d.", token, name, line_number
                    )
                    raise ValueError(
                        f"Invalid number {token!r} at {name}:{line_number}"
                    ) from None
            yield np.asarray(values, dtype=np.float64)
