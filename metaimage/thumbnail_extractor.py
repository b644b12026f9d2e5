# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Thumbnail extractor for EXIF/TIFF data

Locates the JPEG thumbnail referenced by IFD1 (the IFD that follows
IFD0 in the chain). Offsets are relative to the TIFF stream.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Optional

from metaimage.byte_reader import ByteReader
from metaimage.exceptions import MetadataReadError
from metaimage.exif_parser import read_tiff_header
from metaimage.exif_tags import JPEG_INTERCHANGE_FORMAT, JPEG_INTERCHANGE_FORMAT_LENGTH
from metaimage.ifd_walker import IFD_ENTRY_SIZE, MAX_IFD_ENTRIES
from metaimage.raw_preview import PreviewSpan

logger = logging.getLogger(__name__)


def _next_ifd_offset(reader: ByteReader, ifd_offset: int) -> int:
    num_entries = reader.u16(ifd_offset)
    return reader.u32(ifd_offset + 2 + num_entries * IFD_ENTRY_SIZE)


def find_thumbnail(tiff_data: bytes) -> Optional[PreviewSpan]:
    """
    Find the IFD1 JPEG thumbnail of a TIFF stream.

    Args:
        tiff_data: TIFF stream (whole TIFF file or JPEG APP1 payload)

    Returns:
        PreviewSpan within tiff_data, or None if there is no usable thumbnail
    """
    try:
        endian, ifd0_offset = read_tiff_header(tiff_data)
        reader = ByteReader(tiff_data, endian)

        ifd1_offset = _next_ifd_offset(reader, ifd0_offset)
        if ifd1_offset == 0 or ifd1_offset == ifd0_offset:
            return None

        num_entries = min(reader.u16(ifd1_offset), MAX_IFD_ENTRIES)
        start = length = None
        entry_offset = ifd1_offset + 2
        for _ in range(num_entries):
            reader.check(entry_offset, IFD_ENTRY_SIZE)
            tag_id = reader.u16(entry_offset)
            if tag_id == JPEG_INTERCHANGE_FORMAT:
                start = reader.u32(entry_offset + 8)
            elif tag_id == JPEG_INTERCHANGE_FORMAT_LENGTH:
                length = reader.u32(entry_offset + 8)
            entry_offset += IFD_ENTRY_SIZE

        if not start or not length:
            return None
        reader.check(start, length)
    except MetadataReadError as e:
        logger.debug(f"No thumbnail: {e}")
        return None

    return PreviewSpan(start, start + length)
