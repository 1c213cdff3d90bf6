"""Streaming byte histogram.

A `ByteReader` is scoped to one stream and one guess. It keeps a running count
per byte value, the total number of bytes consumed and the first byte seen.
State only ever grows.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable
from typing import BinaryIO

DEFAULT_CHUNK_SIZE = 4096


class ByteReader:
    def __init__(self, stream: BinaryIO, chunk_size: int | None = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size is not None and chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.stream = stream
        self.chunk_size = chunk_size
        self.counts: list[int] = [0] * 256
        self.total = 0
        self.first_byte: int | None = None
        # one byte of look-ahead makes at_end() exact on pipes
        self._pending = b""
        self._eof = False

    def read_chunk(self, size: int | None = None) -> bool:
        """Consume up to `size` bytes (default: chunk_size, None: everything left)."""
        if self._eof:
            return False
        size = self.chunk_size if size is None else size
        if size is None:
            data = self._pending + (self.stream.read() or b"")
        else:
            data = self._pending + (self.stream.read(max(size - len(self._pending), 0)) or b"")
        self._pending = self.stream.read(1) or b""
        self._eof = not self._pending
        if not data:
            return False
        self._update(data)
        return True

    def _update(self, data: bytes) -> None:
        if self.first_byte is None:
            self.first_byte = data[0]
        counts = self.counts
        for byte, seen in Counter(data).items():
            counts[byte] += seen
        self.total += len(data)

    def at_end(self) -> bool:
        return self._eof

    def sum_over(self, byte_values: Iterable[int]) -> int:
        """Sum of counts over any set or range of byte values."""
        counts = self.counts
        return sum(counts[value] for value in byte_values)

    def relative_count(self, count: int) -> float:
        """`count / total`; NaN before any byte was read, so callers check `total` first."""
        if not self.total:
            return math.nan
        return count / self.total
