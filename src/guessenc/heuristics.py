"""Ordered guess rules evaluated against a `ByteReader` after every chunk.

Order matters: ASCII needs the whole stream, the null-byte and UTF-8 rules
are structural, and the single-byte statistics run last because almost any
high-bit text scores something there.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from guessenc.reader import ByteReader
from guessenc.registry import (
    ASCII,
    UTF_8,
    UTF_16,
    UTF_16BE,
    UTF_16LE,
    UTF_32,
    Encoding,
)
from guessenc.testchars import TestCharTable

logger = logging.getLogger(__name__)

# Share of test-char bytes that decides on the spot.
TEST_THRESHOLD_DIRECT = 0.1
# Share the best candidate needs once no encoding hit the direct threshold.
TEST_THRESHOLD_APPROX = 0.0004

NULL_BYTE_THRESHOLD = 0.25

ASCII_RANGE = range(0x00, 0x80)
UTF8_CONTINUATION = range(0x80, 0xC0)
# lead byte range -> continuation bytes it announces
UTF8_LEADS: tuple[tuple[range, int], ...] = (
    (range(0xC0, 0xE0), 1),  # 110xxxxx
    (range(0xE0, 0xF0), 2),  # 1110xxxx
    (range(0xF0, 0xF8), 3),  # 11110xxx
)


class HeuristicRule(Protocol):
    name: str

    @property
    def encodings(self) -> tuple[Encoding, ...]: ...

    def evaluate(self, reader: ByteReader) -> Encoding | None: ...


@dataclass(frozen=True)
class AsciiRule:
    """Everything read so far is 7-bit, and nothing is left to read."""

    name: str = "ascii"

    @property
    def encodings(self) -> tuple[Encoding, ...]:
        return (ASCII,)

    def evaluate(self, reader: ByteReader) -> Encoding | None:
        if reader.at_end() and reader.sum_over(ASCII_RANGE) == reader.total:
            return ASCII
        return None


@dataclass(frozen=True)
class NullByteRule:
    """Lots of zero bytes means UTF-16/32; the first byte picks the flavour."""

    threshold: float = NULL_BYTE_THRESHOLD
    name: str = "null-bytes"

    @property
    def encodings(self) -> tuple[Encoding, ...]:
        return (UTF_32, UTF_16BE, UTF_16LE, UTF_16)

    def evaluate(self, reader: ByteReader) -> Encoding | None:
        if not reader.total or reader.relative_count(reader.counts[0]) <= self.threshold:
            return None
        if reader.first_byte == 0x00:
            return UTF_32
        if reader.first_byte == 0xFE:
            return UTF_16BE
        if reader.first_byte == 0xFF:
            return UTF_16LE
        return UTF_16


@dataclass(frozen=True)
class Utf8StructureRule:
    """Lead bytes, weighted by the continuation bytes they announce, equal the continuations."""

    name: str = "utf-8"

    @property
    def encodings(self) -> tuple[Encoding, ...]:
        return (UTF_8,)

    def evaluate(self, reader: ByteReader) -> Encoding | None:
        expected = sum(reader.sum_over(leads) * width for leads, width in UTF8_LEADS)
        if expected > 0 and expected == reader.sum_over(UTF8_CONTINUATION):
            return UTF_8
        return None


@dataclass(frozen=True)
class SingleByteRule:
    """Frequency of accented letters and symbols per candidate single-byte charset.

    The first candidate (in pool order) whose ratio reaches `direct` wins.
    Otherwise the best ratio wins if it reaches `approx`; equal ratios keep
    the earlier candidate.
    """

    table: TestCharTable
    direct: float = TEST_THRESHOLD_DIRECT
    approx: float = TEST_THRESHOLD_APPROX
    name: str = "single-byte"

    @property
    def encodings(self) -> tuple[Encoding, ...]:
        return self.table.pool

    def evaluate(self, reader: ByteReader) -> Encoding | None:
        if not reader.total:
            return None
        best: Encoding | None = None
        best_ratio = -1.0
        for encoding in self.table.pool:
            ratio = reader.relative_count(reader.sum_over(self.table.byte_set_for(encoding)))
            if ratio >= self.direct:
                return encoding
            if ratio > best_ratio:
                best, best_ratio = encoding, ratio
        if best is not None and best_ratio >= self.approx:
            logger.debug("Approximate single-byte match %s (%.5f)", best, best_ratio)
            return best
        return None


def build_rules(
    table: TestCharTable,
    direct: float = TEST_THRESHOLD_DIRECT,
    approx: float = TEST_THRESHOLD_APPROX,
) -> tuple[HeuristicRule, ...]:
    return (
        AsciiRule(),
        NullByteRule(),
        Utf8StructureRule(),
        SingleByteRule(table, direct=direct, approx=approx),
    )
