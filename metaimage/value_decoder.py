# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IFD entry value decoder

Decodes the value of a single IFD entry. A value whose total size is at
most 4 bytes lives inline in the entry's value field; anything larger is
stored elsewhere in the buffer and the field holds its offset.

decode_value() returns None when the value is absent, whatever the
reason (out of bounds, unsupported type/count combination).

Copyright 2025 DNAi inc.
"""

import logging
from enum import IntEnum
from typing import Any, Optional

from metaimage.byte_reader import ByteReader
from metaimage.exceptions import MetadataReadError, UnsupportedTypeError

logger = logging.getLogger(__name__)


class ExifTagType(IntEnum):
    """EXIF tag data types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5


# EXIF tag sizes in bytes
TAG_SIZES = {
    ExifTagType.BYTE: 1,
    ExifTagType.ASCII: 1,
    ExifTagType.SHORT: 2,
    ExifTagType.LONG: 4,
    ExifTagType.RATIONAL: 8,
}

INLINE_VALUE_SIZE = 4


def value_byte_size(tag_type: int, count: int) -> int:
    """
    Total size in bytes of an entry's value.

    Raises:
        UnsupportedTypeError: If the type code is not one we decode
    """
    try:
        return TAG_SIZES[ExifTagType(tag_type)] * count
    except ValueError:
        raise UnsupportedTypeError(tag_type, count)


def is_inline(tag_type: int, count: int) -> bool:
    """True when the value fits in the 4-byte field (size <= 4)."""
    return value_byte_size(tag_type, count) <= INLINE_VALUE_SIZE


def _rational(reader: ByteReader, offset: int) -> float:
    numerator, denominator = reader.u32_pair(offset)
    if denominator == 0:
        return 0.0
    return numerator / denominator


def _ascii(data: bytes) -> str:
    # count includes the NUL terminator
    null_pos = data.find(b'\x00')
    if null_pos >= 0:
        data = data[:null_pos]

    if any(b > 127 for b in data):
        try:
            return data.decode('utf-8', errors='strict').strip()
        except UnicodeDecodeError:
            pass
    return data.decode('ascii', errors='replace').strip()


def _decode(reader: ByteReader, tag_type: int, count: int, field_offset: int) -> Any:
    size = value_byte_size(tag_type, count)

    if size <= INLINE_VALUE_SIZE:
        data_offset = field_offset
    else:
        data_offset = reader.u32(field_offset)
    reader.check(data_offset, size)

    if tag_type == ExifTagType.BYTE and count == 1:
        return reader.u8(data_offset)

    if tag_type == ExifTagType.ASCII and count >= 1:
        return _ascii(reader.read_bytes(data_offset, count - 1))

    if tag_type == ExifTagType.SHORT and count == 1:
        return reader.u16(data_offset)

    if tag_type == ExifTagType.LONG and count == 1:
        return reader.u32(data_offset)

    if tag_type == ExifTagType.RATIONAL:
        if count == 1:
            return _rational(reader, data_offset)
        if count == 3:
            return tuple(_rational(reader, data_offset + i * 8) for i in range(3))

    raise UnsupportedTypeError(tag_type, count)


def decode_value(reader: ByteReader, tag_type: int, count: int, field_offset: int) -> Optional[Any]:
    """
    Decode the value of one IFD entry.

    Args:
        reader: Reader over the TIFF buffer, carrying its byte order
        tag_type: Entry type code (ExifTagType)
        count: Number of values declared by the entry
        field_offset: Offset of the entry's 4-byte value/offset field

    Returns:
        int for BYTE/SHORT/LONG, str for ASCII, float for a single
        RATIONAL, a 3-tuple of floats for a RATIONAL triplet, or None
        when the value is absent
    """
    try:
        return _decode(reader, tag_type, count, field_offset)
    except MetadataReadError as e:
        logger.debug(f"Value at field offset {field_offset} not decoded: {e}")
        return None
