# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounds-checked, endian-aware reads over an immutable byte buffer.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Optional

from metaimage.exceptions import OutOfBoundsError

LITTLE_ENDIAN = '<'
BIG_ENDIAN = '>'

_BYTE_ORDER_MARKERS = {
    b'II': LITTLE_ENDIAN,
    b'MM': BIG_ENDIAN,
}


def byte_order_from_marker(marker: bytes) -> Optional[str]:
    """
    Map a TIFF byte-order marker to a struct prefix.

    Args:
        marker: The first two bytes of a TIFF stream

    Returns:
        '<' for ``II``, '>' for ``MM``, None for anything else
    """
    return _BYTE_ORDER_MARKERS.get(bytes(marker[:2]))


class ByteReader:
    """
    Reads fixed-width unsigned integers from a buffer.

    Every read is checked against the buffer length and raises
    OutOfBoundsError instead of returning short data. The reader
    never modifies the buffer.
    """

    def __init__(self, file_data: bytes, endian: str = LITTLE_ENDIAN):
        if endian not in (LITTLE_ENDIAN, BIG_ENDIAN):
            raise ValueError(f"Invalid byte order: {endian!r}")
        self.file_data = file_data
        self.endian = endian

    def check(self, offset: int, size: int) -> None:
        """Raise OutOfBoundsError unless [offset, offset + size) is inside the buffer."""
        if offset < 0 or size < 0 or offset + size > len(self.file_data):
            raise OutOfBoundsError(offset, size, len(self.file_data))

    def read_bytes(self, offset: int, size: int) -> bytes:
        self.check(offset, size)
        return bytes(self.file_data[offset:offset + size])

    def u8(self, offset: int) -> int:
        self.check(offset, 1)
        return self.file_data[offset]

    def u16(self, offset: int) -> int:
        self.check(offset, 2)
        return struct.unpack_from(f'{self.endian}H', self.file_data, offset)[0]

    def u32(self, offset: int) -> int:
        self.check(offset, 4)
        return struct.unpack_from(f'{self.endian}I', self.file_data, offset)[0]

    def u32_pair(self, offset: int) -> tuple:
        """Read two consecutive u32 values, as used by RATIONAL."""
        self.check(offset, 8)
        return struct.unpack_from(f'{self.endian}II', self.file_data, offset)
