# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Pixel dimension readers

Reads width and height from the headers of JPEG, PNG, GIF, BMP and
WebP files without decoding pixel data. TIFF dimensions come from the
parsed IFD0 record instead.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Any, Dict, Optional, Tuple

# SOF markers: 0xFFC0-0xFFC3, 0xFFC5-0xFFC7, 0xFFC9-0xFFCB, 0xFFCD-0xFFCF
SOF_MARKERS = frozenset({0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7,
                         0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF})

Dimensions = Tuple[int, int]


def jpeg_dimensions(file_data: bytes) -> Optional[Dimensions]:
    """
    Parse JPEG dimensions from the first SOF (Start of Frame) segment.

    Segments are walked by length so that an SOF inside an embedded
    EXIF thumbnail is never picked up.
    """
    if file_data[:2] != b'\xff\xd8':
        return None

    offset = 2
    while offset + 4 <= len(file_data):
        if file_data[offset] != 0xFF:
            return None
        marker = file_data[offset + 1]
        if marker == 0xFF:
            offset += 1
            continue
        if 0xD0 <= marker <= 0xD7 or marker == 0x01:
            offset += 2
            continue
        if marker in (0xD9, 0xDA):
            return None

        length = struct.unpack('>H', file_data[offset + 2:offset + 4])[0]
        if marker in SOF_MARKERS:
            if offset + 9 > len(file_data):
                return None
            height, width = struct.unpack('>HH', file_data[offset + 5:offset + 9])
            return (width, height)
        offset += 2 + length

    return None


def png_dimensions(file_data: bytes) -> Optional[Dimensions]:
    # IHDR: length(4) + 'IHDR'(4) + width(4) + height(4)
    if len(file_data) < 24 or file_data[12:16] != b'IHDR':
        return None
    return struct.unpack('>II', file_data[16:24])


def gif_dimensions(file_data: bytes) -> Optional[Dimensions]:
    # Logical Screen Descriptor follows the 6-byte version
    if len(file_data) < 10:
        return None
    return struct.unpack('<HH', file_data[6:10])


def bmp_dimensions(file_data: bytes) -> Optional[Dimensions]:
    if len(file_data) < 26:
        return None
    dib_header_size = struct.unpack('<I', file_data[14:18])[0]
    if dib_header_size == 12:
        # BITMAPCOREHEADER
        return struct.unpack('<HH', file_data[18:22])
    # Height is negative for top-down bitmaps
    width, height = struct.unpack('<ii', file_data[18:26])
    return (abs(width), abs(height))


def webp_dimensions(file_data: bytes) -> Optional[Dimensions]:
    if len(file_data) < 30 or file_data[:4] != b'RIFF' or file_data[8:12] != b'WEBP':
        return None

    chunk_type = file_data[12:16]
    chunk_data = file_data[20:]
    if chunk_type == b'VP8X':
        # flags(1) + reserved(3) + width-1 (3) + height-1 (3)
        width = int.from_bytes(chunk_data[4:7], 'little') + 1
        height = int.from_bytes(chunk_data[7:10], 'little') + 1
        return (width, height)
    if chunk_type == b'VP8 ':
        # frame tag(3) + start code(3) + width(2) + height(2), upper 2 bits are scale
        raw_width, raw_height = struct.unpack('<HH', chunk_data[6:10])
        return (raw_width & 0x3FFF, raw_height & 0x3FFF)
    if chunk_type == b'VP8L':
        # signature byte 0x2F, then 14-bit width-1 and height-1
        bits = struct.unpack('<I', chunk_data[1:5])[0]
        return ((bits & 0x3FFF) + 1, ((bits >> 14) & 0x3FFF) + 1)
    return None


_READERS = {
    'JPEG': jpeg_dimensions,
    'PNG': png_dimensions,
    'GIF': gif_dimensions,
    'BMP': bmp_dimensions,
    'WEBP': webp_dimensions,
}


def dimensions_from_metadata(metadata: Dict[str, Any]) -> Optional[Dimensions]:
    """Dimensions from EXIF fields, preferring IFD0 over the Exif sub-IFD."""
    for width_key, height_key in (('ImageWidth', 'ImageLength'),
                                  ('PixelXDimension', 'PixelYDimension')):
        width = metadata.get(width_key)
        height = metadata.get(height_key)
        if width and height:
            return (width, height)
    return None


def read_dimensions(
    file_data: bytes,
    format_name: Optional[str],
    metadata: Optional[Dict[str, Any]] = None
) -> Optional[Dimensions]:
    """
    Read pixel dimensions for a detected format.

    Args:
        file_data: File contents
        format_name: Format from FormatDetector
        metadata: Parsed EXIF record, used for TIFF

    Returns:
        (width, height) or None if they cannot be determined
    """
    reader = _READERS.get((format_name or '').upper())
    if reader is not None:
        try:
            dims = reader(file_data)
        except struct.error:
            dims = None
        if dims:
            return tuple(dims)
    if metadata:
        return dimensions_from_metadata(metadata)
    return None


def aspect_ratio(width: int, height: int) -> Optional[float]:
    if not width or not height:
        return None
    return round(width / height, 2)


def megapixels(width: int, height: int) -> float:
    return round(width * height / 1000000, 2)
