# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata parser

This module locates the TIFF structure holding EXIF data (a bare TIFF or
TIFF-based RAW file, a JPEG APP1 segment, or a PNG eXIf chunk) and walks
it into a flat metadata record.

parse_tiff() never raises on malformed input. A buffer that does not
start with a TIFF byte-order marker gives an empty record with status
INVALID_CONTAINER.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

from metaimage.byte_reader import ByteReader, byte_order_from_marker
from metaimage.exceptions import InvalidContainerError, MetadataReadError
from metaimage.format_detector import FormatDetector
from metaimage.ifd_walker import IFDWalker

logger = logging.getLogger(__name__)

TIFF_MAGIC = 42
EXIF_HEADER = b'Exif\x00\x00'
PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

# Image formats with their own container and no TIFF stream to walk
NON_TIFF_FORMATS = ('GIF', 'BMP', 'WEBP')


class ParseStatus(Enum):
    OK = 'ok'
    NO_EXIF = 'no_exif'
    INVALID_CONTAINER = 'invalid_container'


class ExifResult(NamedTuple):
    metadata: Dict[str, Any]
    status: ParseStatus
    endian: Optional[str] = None


def read_tiff_header(file_data: bytes) -> tuple:
    """
    Read the byte order and first IFD offset of a TIFF stream.

    Returns:
        Tuple of (endian, first_ifd_offset)

    Raises:
        InvalidContainerError: If the byte-order marker is missing or the
            header is truncated
    """
    endian = byte_order_from_marker(file_data[:2])
    if endian is None:
        raise InvalidContainerError("Invalid TIFF header: missing II/MM byte order marker")

    reader = ByteReader(file_data, endian)
    try:
        magic = reader.u16(2)
        first_ifd_offset = reader.u32(4)
    except MetadataReadError:
        raise InvalidContainerError("File too short for TIFF header")

    if magic != TIFF_MAGIC:
        # ORF (IIRO) and RW2 (IIU) keep the TIFF layout with a different magic
        logger.debug(f"Non-standard TIFF magic {magic:#06x}")

    return endian, first_ifd_offset


def parse_tiff(file_data: bytes) -> ExifResult:
    """
    Parse a TIFF stream into a metadata record.

    Args:
        file_data: Bytes starting with the TIFF header

    Returns:
        ExifResult with the record, status and byte order
    """
    try:
        endian, first_ifd_offset = read_tiff_header(file_data)
    except InvalidContainerError as e:
        logger.debug(f"Not a TIFF stream: {e}")
        return ExifResult({}, ParseStatus.INVALID_CONTAINER)

    metadata = IFDWalker(ByteReader(file_data, endian)).walk(first_ifd_offset)
    return ExifResult(metadata, ParseStatus.OK, endian)


def find_jpeg_exif(file_data: bytes) -> Optional[bytes]:
    """
    Find the TIFF payload of the EXIF APP1 segment of a JPEG.

    Returns:
        Bytes following the ``Exif\\0\\0`` header, or None
    """
    if file_data[:2] != b'\xff\xd8':
        return None

    offset = 2
    while offset + 4 <= len(file_data):
        # Check for segment marker
        if file_data[offset] != 0xFF:
            break

        marker = file_data[offset + 1]
        if marker == 0xFF:
            # Fill byte
            offset += 1
            continue
        if marker in (0xD9, 0xDA):  # EOI, SOS
            break
        if 0xD0 <= marker <= 0xD7 or marker == 0x01:
            offset += 2
            continue

        length = struct.unpack('>H', file_data[offset + 2:offset + 4])[0]
        if marker == 0xE1 and file_data[offset + 4:offset + 10] == EXIF_HEADER:
            end = min(offset + 2 + length, len(file_data))
            return bytes(file_data[offset + 10:end])

        offset += 2 + length

    return None


def find_png_exif(file_data: bytes) -> Optional[bytes]:
    """
    Find the eXIf chunk payload of a PNG (PNG 1.2.1+ stores a bare TIFF there).
    """
    if file_data[:8] != PNG_SIGNATURE:
        return None

    offset = 8
    while offset + 8 <= len(file_data):
        chunk_length = struct.unpack('>I', file_data[offset:offset + 4])[0]
        chunk_type = file_data[offset + 4:offset + 8]
        data_start = offset + 8

        if chunk_type == b'eXIf':
            if data_start + chunk_length > len(file_data):
                return None
            payload = bytes(file_data[data_start:data_start + chunk_length])
            # Some writers keep the JPEG-style header
            if payload.startswith(EXIF_HEADER):
                payload = payload[len(EXIF_HEADER):]
            return payload
        if chunk_type in (b'IDAT', b'IEND'):
            # eXIf must precede image data
            break

        # Skip data + CRC
        offset = data_start + chunk_length + 4

    return None


class ExifParser:
    """
    Parser for EXIF metadata from JPEG, PNG, TIFF and TIFF-based RAW data.

    Example:
        >>> parser = ExifParser(file_data)
        >>> metadata = parser.read()
        >>> parser.status
        <ParseStatus.OK: 'ok'>
    """

    def __init__(self, file_data: bytes):
        """
        Initialize the EXIF parser.

        Args:
            file_data: Raw file data
        """
        self.file_data = file_data
        self.metadata: Dict[str, Any] = {}
        self.status: Optional[ParseStatus] = None
        self.endian: Optional[str] = None
        self.tiff_data: Optional[bytes] = None

    def locate_tiff(self) -> Optional[bytes]:
        """Return the TIFF stream holding EXIF data, or None if there is none."""
        if self.file_data[:2] == b'\xff\xd8':
            return find_jpeg_exif(self.file_data)
        if self.file_data[:8] == PNG_SIGNATURE:
            return find_png_exif(self.file_data)
        if FormatDetector.detect_from_signature(self.file_data) in NON_TIFF_FORMATS:
            return None
        # TIFF, TIFF-based RAW, or not a container at all
        return self.file_data

    def read(self) -> Dict[str, Any]:
        """
        Read EXIF metadata.

        Returns:
            Dictionary containing EXIF metadata (empty if there is none)
        """
        self.tiff_data = self.locate_tiff()
        if self.tiff_data is None:
            self.status = ParseStatus.NO_EXIF
            self.metadata = {}
            return self.metadata

        result = parse_tiff(self.tiff_data)
        self.metadata = result.metadata
        self.status = result.status
        self.endian = result.endian
        return self.metadata
