"""Byte-to-byte charset conversion on top of Python's codec registry.

Detection only calls this while building test-character tables. The two
failure modes stay distinct: an encoding with no codec, and input that the
source cannot decode or the target cannot represent.
"""

from __future__ import annotations

import codecs

from guessenc.registry import canonical_key

# Registry spellings that Python's codec lookup does not resolve by itself.
CODEC_ALIASES: dict[str, str] = {
    "MSANSI": "cp1252",
    "MACINTOSH": "mac_roman",
    "EBCDICUS": "cp037",
    "EBCDICATDE": "cp273",
    "KOI8": "koi8_r",
    "ANSIX34": "ascii",
    "SHIFTJIS": "shift_jis",
}


class TranscodeError(ValueError):
    """Base error for conversion failures."""


class UnsupportedEncodingError(TranscodeError):
    def __init__(self, encoding: str) -> None:
        super().__init__(f"Unsupported encoding: {encoding}")
        self.encoding = encoding


class IllegalSequenceError(TranscodeError):
    def __init__(self, source: str, target: str, reason: str) -> None:
        super().__init__(f"Illegal sequence converting {source} -> {target}: {reason}")
        self.source = source
        self.target = target


def codec_name(encoding: str) -> str:
    """Resolve a registry spelling to a Python codec name or raise UnsupportedEncodingError."""
    candidate = CODEC_ALIASES.get(canonical_key(encoding), encoding)
    try:
        return codecs.lookup(candidate).name
    except LookupError:
        raise UnsupportedEncodingError(encoding) from None


def convert(data: bytes, from_encoding: str, to_encoding: str) -> bytes:
    source = codec_name(from_encoding)
    target = codec_name(to_encoding)
    try:
        text = data.decode(source)
    except UnicodeDecodeError as exc:
        raise IllegalSequenceError(from_encoding, to_encoding, exc.reason) from exc
    except LookupError:
        # bytes-to-bytes codecs such as base64 are not text encodings
        raise UnsupportedEncodingError(from_encoding) from None
    try:
        return text.encode(target)
    except UnicodeEncodeError as exc:
        raise IllegalSequenceError(from_encoding, to_encoding, exc.reason) from exc
    except LookupError:
        raise UnsupportedEncodingError(to_encoding) from None
