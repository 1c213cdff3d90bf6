import pytest

from guessenc.transcode import (
    IllegalSequenceError,
    TranscodeError,
    UnsupportedEncodingError,
    codec_name,
    convert,
)


def test_convert_utf8_to_latin1():
    assert convert("é".encode(), "UTF-8", "ISO-8859-1") == b"\xe9"


def test_registry_spellings_resolve_to_codecs():
    assert codec_name("MS-ANSI") == "cp1252"
    assert convert("€".encode(), "UTF-8", "MS-ANSI") == b"\x80"
    assert convert("é".encode(), "UTF-8", "MACINTOSH") == b"\x8e"


@pytest.mark.parametrize("encoding", ["SCSU", "BOCU-1", "UTF-EBCDIC", "NO-SUCH-CHARSET"])
def test_unsupported_encoding(encoding):
    with pytest.raises(UnsupportedEncodingError):
        convert(b"a", "UTF-8", encoding)


def test_unrepresentable_character_is_illegal_sequence():
    with pytest.raises(IllegalSequenceError):
        convert("€".encode(), "UTF-8", "ISO-8859-1")


def test_undecodable_input_is_illegal_sequence():
    with pytest.raises(IllegalSequenceError) as info:
        convert(b"\xff\xfe\xfd", "UTF-8", "CP1252")
    assert isinstance(info.value, TranscodeError)
