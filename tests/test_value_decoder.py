"""
Unit tests for metaimage/value_decoder.py.

Buffers are laid out by hand: the 4-byte value field sits at offset 0
and out-of-line data, when any, starts at offset 4.
"""

import struct

import pytest

from metaimage.byte_reader import ByteReader
from metaimage.exceptions import UnsupportedTypeError
from metaimage.value_decoder import (
    ExifTagType,
    decode_value,
    is_inline,
    value_byte_size,
)


def _offset_field(endian, data):
    """Value field pointing at data stored right after it."""
    return struct.pack(endian + "I", 4) + data


# ---------------------------------------------------------------------------
# Inline rule
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("tag_type, count, inline", [
    (ExifTagType.ASCII, 4, True),
    (ExifTagType.ASCII, 5, False),
    (ExifTagType.SHORT, 2, True),
    (ExifTagType.SHORT, 3, False),
    (ExifTagType.LONG, 1, True),
    (ExifTagType.RATIONAL, 1, False),
    (ExifTagType.BYTE, 4, True),
])
def test_inline_boundary(tag_type, count, inline):
    assert is_inline(tag_type, count) is inline


def test_value_byte_size_unknown_type():
    assert value_byte_size(ExifTagType.RATIONAL, 3) == 24
    with pytest.raises(UnsupportedTypeError):
        value_byte_size(7, 1)


def test_ascii_of_four_bytes_is_inline():
    reader = ByteReader(b"abc\x00")
    assert decode_value(reader, ExifTagType.ASCII, 4, 0) == "abc"


def test_ascii_of_five_bytes_is_at_offset():
    reader = ByteReader(_offset_field("<", b"abcd\x00"))
    assert decode_value(reader, ExifTagType.ASCII, 5, 0) == "abcd"


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def test_integers_in_both_byte_orders():
    assert decode_value(ByteReader(b"\x2a\x00\x00\x00", "<"), ExifTagType.SHORT, 1, 0) == 42
    assert decode_value(ByteReader(b"\x00\x2a\x00\x00", ">"), ExifTagType.SHORT, 1, 0) == 42
    assert decode_value(ByteReader(b"\x00\x00\x01\x00", ">"), ExifTagType.LONG, 1, 0) == 256
    assert decode_value(ByteReader(b"\x07\x00\x00\x00"), ExifTagType.BYTE, 1, 0) == 7


def test_rational_half():
    reader = ByteReader(_offset_field(">", struct.pack(">II", 1, 2)), ">")
    assert decode_value(reader, ExifTagType.RATIONAL, 1, 0) == 0.5


def test_rational_zero_denominator_is_zero():
    reader = ByteReader(_offset_field("<", struct.pack("<II", 5, 0)))
    assert decode_value(reader, ExifTagType.RATIONAL, 1, 0) == 0.0


def test_rational_triplet():
    data = struct.pack("<IIIIII", 40, 1, 26, 1, 4650, 100)
    reader = ByteReader(_offset_field("<", data))
    assert decode_value(reader, ExifTagType.RATIONAL, 3, 0) == (40.0, 26.0, 46.5)


def test_ascii_stops_at_first_nul_and_strips():
    reader = ByteReader(_offset_field("<", b" Acme \x00junk\x00"))
    assert decode_value(reader, ExifTagType.ASCII, 11, 0) == "Acme"


def test_ascii_utf8():
    raw = "Café".encode("utf-8") + b"\x00"
    reader = ByteReader(_offset_field("<", raw))
    assert decode_value(reader, ExifTagType.ASCII, len(raw), 0) == "Café"


def test_ascii_invalid_utf8_uses_replacement():
    reader = ByteReader(_offset_field("<", b"ab\xffcd\x00"))
    value = decode_value(reader, ExifTagType.ASCII, 6, 0)
    assert value.startswith("ab") and value.endswith("cd")


# ---------------------------------------------------------------------------
# Absent values
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("tag_type, count", [
    (7, 4),                       # UNDEFINED
    (9, 1),                       # SLONG
    (ExifTagType.SHORT, 2),
    (ExifTagType.LONG, 0),
    (ExifTagType.RATIONAL, 2),
    (ExifTagType.ASCII, 0),
])
def test_unsupported_type_or_count_is_absent(tag_type, count):
    reader = ByteReader(_offset_field("<", b"\x00" * 32))
    assert decode_value(reader, tag_type, count, 0) is None


def test_offset_past_end_is_absent():
    reader = ByteReader(struct.pack("<I", 1000))
    assert decode_value(reader, ExifTagType.RATIONAL, 1, 0) is None


def test_value_running_past_end_is_absent():
    reader = ByteReader(_offset_field("<", b"abc"))
    assert decode_value(reader, ExifTagType.ASCII, 20, 0) is None


def test_field_outside_buffer_is_absent():
    assert decode_value(ByteReader(b"\x00\x00"), ExifTagType.LONG, 1, 0) is None
