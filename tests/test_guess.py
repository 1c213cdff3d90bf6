import io
import random
from pathlib import Path

import pytest

from guessenc.bom import BOM_RULES
from guessenc.guess import Guesser, guess, guess_bytes, guess_path
from guessenc.registry import (
    ASCII,
    ISO_8859_1,
    KNOWN_ENCODINGS,
    MACINTOSH,
    UNKNOWN,
    UTF_8,
    UTF_16BE,
    UTF_16LE,
    UTF_32,
    UTF_32BE,
    EncodingRegistry,
)
from guessenc.testchars import TestCharTable

GERMAN = (
    "Der Bericht über die Entwicklung der Stadt wurde gestern im Rathaus vorgestellt. "
    "Die Verwaltung möchte in den nächsten Jahren mehr Geld für Schulen, Straßen und "
    "öffentliche Verkehrsmittel ausgeben. Viele Bürger begrüßen diese Pläne, aber einige "
    "Anwohner befürchten höhere Gebühren."
)


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"\xef\xbb\xbf" + "größe".encode("latin-1"), UTF_8),
        (b"\xff\xfe" + "hi".encode("utf-16-le"), UTF_16LE),
        (b"\x00\x00\xfe\xff" + "hi".encode("utf-32-be"), UTF_32BE),
    ],
)
def test_bom_wins_regardless_of_content(data, expected):
    assert guess_bytes(data) == expected


def test_bom_for_every_rule():
    for rule in BOM_RULES:
        bom = rule.pattern + (b"+" if rule.trailing else b"")
        assert guess(io.BytesIO(bom + b"\x00\x01\x02")) == rule.encoding


@pytest.mark.parametrize("chunk_size", [1, 7, 64, 4096, None])
def test_ascii_needs_the_whole_stream(chunk_size):
    data = b"plain ascii text, nothing else\n" * 100
    assert guess_bytes(data, chunk_size=chunk_size) == ASCII


def test_utf8_text():
    text = "Grüße aus Köln! Ça coûte 10 €, und 😀 dazu."
    assert guess_bytes(text.encode("utf-8")) == UTF_8


def test_utf16be_by_null_bytes_without_bom_path():
    data = b"\xfe\xff" + "hello world".encode("utf-16-be")
    assert guess_bytes(data, ignore_bom=True) == UTF_16BE


def test_german_latin1_text():
    assert guess_bytes(GERMAN.encode("latin-1")) == ISO_8859_1


def test_empty_input_is_unknown():
    assert guess_bytes(b"") == UNKNOWN
    assert guess_bytes(b"", ignore_bom=True) == UNKNOWN


def test_random_bytes_hit_the_first_single_byte_candidate():
    rng = random.Random(1234)
    data = bytes(rng.randrange(256) for _ in range(512))
    result = guess_bytes(data, ignore_bom=True)
    assert result == MACINTOSH


def test_detection_is_repeatable():
    data = GERMAN.encode("latin-1")
    first = guess(io.BytesIO(data), chunk_size=16)
    second = guess(io.BytesIO(data), chunk_size=16)
    assert first == second


class _FirstByteSpy:
    name = "spy"
    encodings = ()

    def __init__(self) -> None:
        self.first_bytes: list[int | None] = []

    def evaluate(self, reader):
        self.first_bytes.append(reader.first_byte)
        return None


def test_ignore_bom_falls_through_to_heuristics():
    data = b"\xef\xbb\xbf" + "größe".encode("latin-1")
    spy = _FirstByteSpy()
    guesser = Guesser(rules=[spy])
    assert guesser.guess_bytes(data) == UTF_8
    assert spy.first_bytes == []

    assert guesser.guess_bytes(data, ignore_bom=True) == UNKNOWN
    assert spy.first_bytes == [0xEF]
    assert guess_bytes(data, ignore_bom=True) != UTF_8


def test_pipe_skips_bom_detection(make_pipe):
    data = b"\x00\x00\xfe\xff" + "hi".encode("utf-32-be")
    assert guess_bytes(data) == UTF_32BE
    assert guess(make_pipe(data)) == UTF_32


def test_results_outside_registry_are_ignored():
    registry = EncodingRegistry(e for e in KNOWN_ENCODINGS if e != UTF_8)
    guesser = Guesser(registry=registry, table=TestCharTable.from_resource(registry=registry))
    data = "größe".encode("utf-8")
    assert Guesser().guess_bytes(data) == UTF_8
    assert guesser.guess_bytes(data) != UTF_8


def test_guess_path(tmp_path: Path):
    path = tmp_path / "sample.txt"
    path.write_bytes("naïve café".encode("utf-8"))
    assert guess_path(path) == UTF_8
    assert Guesser().guess_path(path, chunk_size=None) == UTF_8


def test_supported_encodings():
    guesser = Guesser()
    supported = guesser.supported_encodings
    assert supported[:2] == (ASCII, UTF_32)
    assert UTF_8 in supported
    assert MACINTOSH in supported
    assert guesser.supported_boms == tuple(rule.encoding for rule in BOM_RULES)


def test_empty_rule_chain_reports_unknown():
    guesser = Guesser(rules=[])
    assert guesser.rules == ()
    assert guesser.guess_bytes(b"abc") == UNKNOWN
    assert guesser.guess_bytes(b"\xef\xbb\xbfabc") == UTF_8


def test_table_must_share_the_guesser_registry():
    registry = EncodingRegistry(KNOWN_ENCODINGS)
    table = TestCharTable.from_resource(registry=EncodingRegistry(KNOWN_ENCODINGS))
    with pytest.raises(ValueError):
        Guesser(registry=registry, table=table)
