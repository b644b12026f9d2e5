# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
File validation: supported format, size ceiling and decodability.

Decodability is checked with Pillow. RAW containers are not decoded
here; their embedded preview is checked instead by the caller.
"""

import io
import logging
from typing import Optional

from PIL import Image

from metaimage.exceptions import FileValidationError, UnsupportedFormatError
from metaimage.format_detector import FormatDetector

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 50 * 1024 * 1024


def check_file_size(file_size: int, max_size: int = MAX_FILE_SIZE) -> None:
    """Raise FileValidationError if the file is empty or larger than max_size."""
    if file_size <= 0:
        raise FileValidationError("File is empty.")
    if file_size > max_size:
        logger.warning(f"File of {file_size} bytes is over the {max_size} byte limit")
        limit_mb = max_size // (1024 * 1024)
        raise FileValidationError(
            f"File size exceeds {limit_mb}MB limit. Please select a smaller file."
        )


def verify_decodable(file_data: bytes) -> str:
    """
    Check that Pillow can open and verify the image.

    Returns:
        The format name reported by Pillow

    Raises:
        FileValidationError: If the image cannot be decoded
    """
    try:
        with Image.open(io.BytesIO(file_data)) as img:
            img.verify()
            return img.format
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(f"Image failed to decode: {e}")
        raise FileValidationError("Failed to load image. The file may be corrupted.")


def validate_file(
    file_data: bytes,
    file_name: Optional[str] = None,
    max_size: int = MAX_FILE_SIZE,
    verify: bool = True,
) -> str:
    """
    Validate an image file before metadata extraction.

    Args:
        file_data: File contents
        file_name: File name, used for extension-based detection
        max_size: Size ceiling in bytes
        verify: Decode-check non-RAW images with Pillow

    Returns:
        Detected format name

    Raises:
        UnsupportedFormatError: If the format is not supported
        FileValidationError: If the file is empty, too large or corrupt
    """
    check_file_size(len(file_data), max_size)

    format_name = FormatDetector.detect_format(file_name, file_data)
    if not FormatDetector.is_supported_format(format_name):
        suffix = f" ({file_name})" if file_name else ""
        logger.warning(f"Rejected unsupported file{suffix}")
        raise UnsupportedFormatError(
            f"Unsupported file format: {format_name or 'unknown'}{suffix}. "
            f"Please select a valid image file."
        )

    if verify and not FormatDetector.is_raw_format(format_name):
        verify_decodable(file_data)

    return format_name
