# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
metaimage - EXIF metadata and RAW preview reader

Reads EXIF metadata from JPEG, PNG, TIFF and TIFF-based RAW files by
walking their binary IFD structures, converts GPS positions to decimal
degrees, and extracts the embedded JPEG preview of camera RAW files.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from metaimage.core import MetaImage
from metaimage.exceptions import (
    MetaImageError,
    MetadataReadError,
    OutOfBoundsError,
    UnsupportedTypeError,
    InvalidContainerError,
    NoPreviewFoundError,
    UnsupportedFormatError,
    FileValidationError,
)
from metaimage.exif_parser import ExifParser, ExifResult, ParseStatus, parse_tiff
from metaimage.geolocation import gps_coordinates, to_decimal_degrees
from metaimage.ifd_walker import walk_ifd
from metaimage.raw_preview import PreviewSpan, RawPreviewExtractor, extract_largest_jpeg
from metaimage.value_formatter import group_metadata

__all__ = [
    "MetaImage",
    "MetaImageError",
    "MetadataReadError",
    "OutOfBoundsError",
    "UnsupportedTypeError",
    "InvalidContainerError",
    "NoPreviewFoundError",
    "UnsupportedFormatError",
    "FileValidationError",
    "ExifParser",
    "ExifResult",
    "ParseStatus",
    "parse_tiff",
    "walk_ifd",
    "gps_coordinates",
    "to_decimal_degrees",
    "PreviewSpan",
    "RawPreviewExtractor",
    "extract_largest_jpeg",
    "group_metadata",
]
