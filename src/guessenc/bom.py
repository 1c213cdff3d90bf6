"""Byte-order-mark detection at stream start.

Rules are tried in a fixed order; longer marks come before shorter marks they
share a prefix with (the UTF-32LE mark starts with the UTF-16LE one). Each
trial reads exactly the rule's length and seeks back on a miss, so a stream
that cannot report its position skips BOM detection altogether.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO

from guessenc.registry import (
    BOCU_1,
    SCSU,
    UTF_7,
    UTF_8,
    UTF_16BE,
    UTF_16LE,
    UTF_32BE,
    UTF_32LE,
    UTF_EBCDIC,
    Encoding,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BomRule:
    pattern: bytes
    encoding: Encoding
    # accepted values for one extra byte after the pattern (UTF-7)
    trailing: frozenset[int] | None = None

    @property
    def length(self) -> int:
        return len(self.pattern) + (1 if self.trailing else 0)

    def matches(self, head: bytes) -> bool:
        if len(head) != self.length or not head.startswith(self.pattern):
            return False
        return not self.trailing or head[-1] in self.trailing


BOM_RULES: tuple[BomRule, ...] = (
    BomRule(b"\x00\x00\xfe\xff", UTF_32BE),
    BomRule(b"\xff\xfe\x00\x00", UTF_32LE),
    BomRule(b"\xef\xbb\xbf", UTF_8),
    BomRule(b"\xfe\xff", UTF_16BE),
    BomRule(b"\xff\xfe", UTF_16LE),
    BomRule(b"\x0e\xfe\xff", SCSU),
    BomRule(b"\x2b\x2f\x76", UTF_7, frozenset({0x38, 0x39, 0x2B, 0x2F})),
    BomRule(b"\xdd\x73\x66\x73", UTF_EBCDIC),
    BomRule(b"\xfb\xee\x28", BOCU_1),
)


def stream_position(stream: BinaryIO) -> int | None:
    """Current offset, or None for pipes and other unseekable streams."""
    try:
        if not stream.seekable():
            return None
        return stream.tell()
    except (OSError, io.UnsupportedOperation, AttributeError):
        return None


def detect_bom(stream: BinaryIO, rules: tuple[BomRule, ...] = BOM_RULES) -> Encoding | None:
    """Return the encoding of the first matching BOM, leaving the stream just past it."""
    origin = stream_position(stream)
    if origin is None:
        logger.debug("Stream is not seekable; skipping BOM detection")
        return None

    for rule in rules:
        head = stream.read(rule.length) or b""
        if rule.matches(head):
            logger.debug("BOM %s matched %s", head.hex(), rule.encoding)
            return rule.encoding
        stream.seek(origin)
    return None
