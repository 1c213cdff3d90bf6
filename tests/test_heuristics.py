import io

import pytest

from guessenc.heuristics import (
    AsciiRule,
    NullByteRule,
    SingleByteRule,
    Utf8StructureRule,
    build_rules,
)
from guessenc.reader import ByteReader
from guessenc.registry import (
    ASCII,
    CP1252,
    ISO_8859_1,
    UTF_8,
    UTF_16,
    UTF_16BE,
    UTF_16LE,
    UTF_32,
    build_registry,
)
from guessenc.testchars import TestCharTable


def _read_all(data: bytes) -> ByteReader:
    reader = ByteReader(io.BytesIO(data), chunk_size=None)
    reader.read_chunk()
    return reader


def _table() -> TestCharTable:
    return TestCharTable(
        registry=build_registry(),
        entries={"CP1252": [0xE4], "ISO-8859-1": [0xE4, 0xF6]},
        pool=["CP1252", "ISO-8859-1"],
    )


def test_ascii_rule_waits_for_end_of_stream():
    reader = ByteReader(io.BytesIO(b"hello"), chunk_size=4)
    reader.read_chunk()
    assert AsciiRule().evaluate(reader) is None
    reader.read_chunk()
    assert AsciiRule().evaluate(reader) == ASCII


def test_ascii_rule_rejects_high_bytes():
    assert AsciiRule().evaluate(_read_all(b"caf\xe9")) is None


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"\xfe\xff" + "hi there".encode("utf-16-be"), UTF_16BE),
        (b"\xff\xfe" + "hi".encode("utf-16-le"), UTF_16LE),
        ("hi".encode("utf-32-be"), UTF_32),
        ("hi there".encode("utf-16-le"), UTF_16),
    ],
)
def test_null_byte_rule_uses_first_byte(data, expected):
    assert NullByteRule().evaluate(_read_all(data)) == expected


def test_null_byte_rule_needs_more_than_a_quarter():
    assert NullByteRule().evaluate(_read_all(b"\x00abc")) is None
    assert NullByteRule().evaluate(_read_all(b"a\x00\x00bc")) == UTF_16


@pytest.mark.parametrize("text", ["größe", "€ 100", "smile \U0001f600", "Ça va, Zoë?"])
def test_utf8_rule_accepts_well_formed_sequences(text):
    assert Utf8StructureRule().evaluate(_read_all(text.encode("utf-8"))) == UTF_8


@pytest.mark.parametrize(
    "data", [b"plain ascii", b"\xc3", "größe".encode("latin-1"), b"\x80\x80"]
)
def test_utf8_rule_rejects_unbalanced_counts(data):
    assert Utf8StructureRule().evaluate(_read_all(data)) is None


def test_single_byte_direct_match_takes_first_in_pool():
    rule = SingleByteRule(_table())
    assert rule.evaluate(_read_all(b"\xe4bc")) == CP1252


def test_single_byte_direct_threshold_is_inclusive():
    rule = SingleByteRule(_table())
    assert rule.evaluate(_read_all(b"\xe4" + b"a" * 9)) == CP1252


def test_single_byte_approximate_match_prefers_highest_ratio():
    rule = SingleByteRule(_table())
    assert rule.evaluate(_read_all(b"\xf6" + b"a" * 999)) == ISO_8859_1


def test_single_byte_ties_keep_pool_order():
    rule = SingleByteRule(_table())
    assert rule.evaluate(_read_all(b"\xe4" + b"a" * 999)) == CP1252


def test_single_byte_below_approximate_threshold():
    rule = SingleByteRule(_table())
    assert rule.evaluate(_read_all(b"\xe4" + b"a" * 9_999)) is None


def test_single_byte_reports_pool_encodings():
    table = _table()
    rule = SingleByteRule(table)
    table.char_bytes_for("cp850")
    assert rule.encodings == (CP1252, ISO_8859_1, "CP850")


def test_build_rules_order():
    rules = build_rules(_table())
    assert [rule.name for rule in rules] == ["ascii", "null-bytes", "utf-8", "single-byte"]
