import io
import math

import pytest

from guessenc.reader import ByteReader


def test_read_chunk_accumulates_counts():
    reader = ByteReader(io.BytesIO(b"abcabz"), chunk_size=4)
    assert reader.read_chunk()
    assert reader.total == 4
    assert reader.first_byte == ord("a")
    assert not reader.at_end()

    assert reader.read_chunk()
    assert reader.total == 6
    assert reader.counts[ord("a")] == 2
    assert reader.counts[ord("z")] == 1
    assert reader.at_end()

    assert not reader.read_chunk()
    assert reader.total == 6


def test_at_end_is_exact_when_stream_length_is_a_chunk_multiple():
    reader = ByteReader(io.BytesIO(b"abcd"), chunk_size=4)
    assert reader.read_chunk()
    assert reader.at_end()


def test_pipe_streams_report_end(make_pipe):
    reader = ByteReader(make_pipe(b"xyz"), chunk_size=2)
    assert reader.read_chunk() and not reader.at_end()
    assert reader.read_chunk() and reader.at_end()
    assert reader.total == 3


def test_explicit_size_overrides_chunk_size():
    reader = ByteReader(io.BytesIO(b"0123456789"), chunk_size=2)
    assert reader.read_chunk(5)
    assert reader.total == 5


def test_none_chunk_size_reads_everything():
    reader = ByteReader(io.BytesIO(b"x" * 10_000), chunk_size=None)
    assert reader.read_chunk()
    assert reader.total == 10_000
    assert reader.at_end()


def test_empty_stream():
    reader = ByteReader(io.BytesIO(b""))
    assert not reader.read_chunk()
    assert reader.total == 0
    assert reader.first_byte is None
    assert reader.at_end()
    assert math.isnan(reader.relative_count(0))


def test_sum_over_ranges_and_sets():
    reader = ByteReader(io.BytesIO(bytes([0, 0, 0x41, 0x80, 0xFF])), chunk_size=None)
    reader.read_chunk()
    assert reader.sum_over(range(0x00, 0x80)) == 3
    assert reader.sum_over({0x80, 0xFF}) == 2
    assert reader.relative_count(reader.counts[0]) == pytest.approx(0.4)


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        ByteReader(io.BytesIO(b""), chunk_size=0)
