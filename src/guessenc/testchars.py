"""Per-encoding byte values of a fixed set of "interesting" non-ASCII characters.

The statistical single-byte rule counts how often these bytes occur. Entries
come from a bundled YAML resource; encodings missing from it are computed on
first access by converting each character from UTF-8 and keeping those that
land on exactly one byte.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from functools import lru_cache
from pathlib import Path

import yaml

from guessenc.registry import (
    CP850,
    CP1252,
    ISO_8859_1,
    ISO_8859_15,
    MACINTOSH,
    MS_ANSI,
    UTF_8,
    Encoding,
    EncodingRegistry,
    default_registry,
)
from guessenc.transcode import TranscodeError, convert

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE = Path(__file__).parent / "resources" / "test_chars.yaml"

# Accented Latin letters plus currency and punctuation symbols (CP1252 upper half).
CHARS_TO_TEST: tuple[str, ...] = tuple(
    "€‚ƒ„…†‡ˆ‰Š‹ŒŽ‘’“”•–—˜™š›œžŸ¡¢£¤¥¦§¨©ª«¬­®¯°±²³´µ¶·¸¹º»¼½¾¿ÀÁÂ"
    "ÃÄÅÆÇÈÉÊËÌÍÎÏÐÑÒÓÔÕÖ×ØÙÚÛÜÝÞßàáâãäåæçèéêëìíîïðñòóôõö÷øùúûüýþÿ"
)

TEST_ENCODINGS: tuple[Encoding, ...] = (
    MACINTOSH,
    ISO_8859_1,
    ISO_8859_15,
    CP1252,
    CP850,
    MS_ANSI,
)

Converter = Callable[[bytes, str, str], bytes]


def load_test_chars(
    path: Path = DEFAULT_RESOURCE, registry: EncodingRegistry | None = None
) -> dict[Encoding, tuple[int, ...]]:
    """Read the encoding -> byte codes mapping from a YAML (or JSON) file."""
    registry = registry or default_registry()
    payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Test character resource must be a mapping: {path}")
    table: dict[Encoding, tuple[int, ...]] = {}
    for name, codes in payload.items():
        values = tuple(int(code) for code in codes or ())
        if any(not 0 <= value <= 0xFF for value in values):
            raise ValueError(f"Byte code out of range for {name} in {path}")
        table[registry.canonicalize(str(name))] = values
    return table


def encode_test_chars(
    encoding: str, chars: Iterable[str] = CHARS_TO_TEST, converter: Converter = convert
) -> tuple[int, ...]:
    """Byte value of each char in `encoding`, skipping chars without a one-byte form."""
    codes: list[int] = []
    for char in chars:
        try:
            encoded = converter(char.encode("utf-8"), UTF_8, encoding)
        except TranscodeError:
            continue
        if len(encoded) == 1:
            codes.append(encoded[0])
    return tuple(codes)


class TestCharTable:
    """Memoizing encoding -> test-byte lookup that also owns the statistical pool."""

    __test__ = False  # not a pytest class

    def __init__(
        self,
        registry: EncodingRegistry | None = None,
        entries: Mapping[str, Iterable[int]] | None = None,
        pool: Iterable[str] = TEST_ENCODINGS,
        converter: Converter = convert,
    ) -> None:
        self.registry = registry or default_registry()
        self._converter = converter
        self._lock = threading.Lock()
        self._entries: dict[Encoding, tuple[int, ...]] = {
            self.registry.canonicalize(name): tuple(codes)
            for name, codes in (entries or {}).items()
        }
        self._byte_sets: dict[Encoding, frozenset[int]] = {}
        self._pool: list[Encoding] = []
        for name in pool:
            encoding = self.registry.canonicalize(name)
            if encoding not in self._pool:
                self._pool.append(encoding)

    @classmethod
    def from_resource(
        cls,
        path: Path = DEFAULT_RESOURCE,
        registry: EncodingRegistry | None = None,
        converter: Converter = convert,
    ) -> TestCharTable:
        registry = registry or default_registry()
        return cls(registry, load_test_chars(path, registry), converter=converter)

    @property
    def pool(self) -> tuple[Encoding, ...]:
        return tuple(self._pool)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        encoding = self.registry.get(name)
        return encoding is not None and encoding in self._entries

    def char_bytes_for(self, name: str) -> tuple[int, ...]:
        encoding = self.registry.canonicalize(name)
        codes = self._entries.get(encoding)
        if codes is not None:
            return codes
        with self._lock:
            codes = self._entries.get(encoding)
            if codes is None:
                codes = encode_test_chars(encoding, converter=self._converter)
                logger.debug("Computed %d test bytes for %s", len(codes), encoding)
                self._entries[encoding] = codes
                if encoding not in self._pool:
                    self._pool.append(encoding)
        return codes

    def byte_set_for(self, name: str) -> frozenset[int]:
        encoding = self.registry.canonicalize(name)
        byte_set = self._byte_sets.get(encoding)
        if byte_set is None:
            byte_set = frozenset(self.char_bytes_for(encoding))
            self._byte_sets[encoding] = byte_set
        return byte_set


@lru_cache(maxsize=1)
def default_test_chars() -> TestCharTable:
    """Process-wide table over the bundled resource and the default registry."""
    return TestCharTable.from_resource()
