"""Canonical catalog of encoding identifiers.

Every spelling of an encoding name ("iso-8859-1", "ISO_8859-1", "iso88591")
collapses onto one key (alphanumerics only, upper-cased), and each key owns a
single `Encoding` token. The registry is additive: unknown but well-formed
names become new tokens instead of errors.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable, Iterator
from functools import lru_cache

_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]")


def canonical_key(name: str) -> str:
    """Strip everything but letters and digits, then upper-case."""
    return _NON_ALNUM_RE.sub("", name).upper()


class Encoding(str):
    """Immutable encoding label; the text is the canonical spelling."""

    __slots__ = ()

    def __new__(cls, name: str) -> Encoding:
        if isinstance(name, Encoding):
            return name
        return super().__new__(cls, name.strip().upper())

    @property
    def key(self) -> str:
        return canonical_key(self)

    def __repr__(self) -> str:
        return f"Encoding({str.__repr__(self)})"


UNKNOWN = Encoding("UNKNOWN")
ASCII = Encoding("ASCII")
MACINTOSH = Encoding("MACINTOSH")
ISO_8859_1 = Encoding("ISO-8859-1")
ISO_8859_2 = Encoding("ISO-8859-2")
ISO_8859_15 = Encoding("ISO-8859-15")
CP1250 = Encoding("CP1250")
CP1251 = Encoding("CP1251")
CP1252 = Encoding("CP1252")
CP850 = Encoding("CP850")
CP852 = Encoding("CP852")
CP856 = Encoding("CP856")
UTF_8 = Encoding("UTF-8")
UTF_16 = Encoding("UTF-16")
UTF_16BE = Encoding("UTF-16BE")
UTF_16LE = Encoding("UTF-16LE")
UTF_32 = Encoding("UTF-32")
UTF_32BE = Encoding("UTF-32BE")
UTF_32LE = Encoding("UTF-32LE")
UTF_7 = Encoding("UTF-7")
UTF_EBCDIC = Encoding("UTF-EBCDIC")
SCSU = Encoding("SCSU")
BOCU_1 = Encoding("BOCU-1")
ANSI_X3_4 = Encoding("ANSI_X3.4")
EBCDIC_AT_DE = Encoding("EBCDIC-AT-DE")
EBCDIC_US = Encoding("EBCDIC-US")
EUC_JP = Encoding("EUC-JP")
KOI_8 = Encoding("KOI-8")
MS_ANSI = Encoding("MS-ANSI")
SHIFT_JIS = Encoding("SHIFT-JIS")

KNOWN_ENCODINGS: tuple[Encoding, ...] = (
    UNKNOWN,
    ASCII,
    MACINTOSH,
    ISO_8859_1,
    ISO_8859_2,
    ISO_8859_15,
    CP1250,
    CP1251,
    CP1252,
    CP850,
    CP852,
    CP856,
    UTF_8,
    UTF_16,
    UTF_16BE,
    UTF_16LE,
    UTF_32,
    UTF_32BE,
    UTF_32LE,
    UTF_7,
    UTF_EBCDIC,
    SCSU,
    BOCU_1,
    ANSI_X3_4,
    EBCDIC_AT_DE,
    EBCDIC_US,
    EUC_JP,
    KOI_8,
    MS_ANSI,
    SHIFT_JIS,
)


class EncodingRegistry:
    """Maps canonical keys to their single `Encoding` token, in registration order."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._by_key: dict[str, Encoding] = {}
        self._lock = threading.Lock()
        for name in names:
            self.register(name)

    def register(self, name: str) -> Encoding:
        """Create the token for `name` once; later spellings of the same key return it."""
        key = canonical_key(name)
        if not key:
            raise ValueError(f"Encoding name has no alphanumeric characters: {name!r}")
        with self._lock:
            existing = self._by_key.get(key)
            if existing is not None:
                return existing
            encoding = Encoding(name)
            self._by_key[key] = encoding
            return encoding

    def canonicalize(self, name: str) -> Encoding:
        existing = self.get(name)
        return existing if existing is not None else self.register(name)

    def get(self, name: str) -> Encoding | None:
        return self._by_key.get(canonical_key(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_key(name) in self._by_key

    def __iter__(self) -> Iterator[Encoding]:
        return iter(list(self._by_key.values()))

    def __len__(self) -> int:
        return len(self._by_key)


def build_registry() -> EncodingRegistry:
    return EncodingRegistry(KNOWN_ENCODINGS)


@lru_cache(maxsize=1)
def default_registry() -> EncodingRegistry:
    """Process-wide registry, built on first use."""
    return build_registry()
