# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
File format detector

Detects image and RAW container formats from file signatures and
extensions, and maps them to MIME types.

Copyright 2025 DNAi inc.
"""

from typing import Dict, Optional
from pathlib import Path


class FormatDetector:
    """
    Detects file formats from file signatures and extensions.

    Signatures are checked before extensions, except for TIFF-based RAW
    files which share the TIFF signature and are told apart by extension.
    """

    # Format signatures (magic numbers), checked in order
    FORMAT_SIGNATURES = (
        (b'\xff\xd8\xff', 'JPEG'),
        (b'\x89PNG\r\n\x1a\n', 'PNG'),
        (b'GIF87a', 'GIF'),
        (b'GIF89a', 'GIF'),
        (b'FUJIFILMCCD-RAW', 'RAF'),
        (b'IIRO', 'ORF'),
        (b'MMOR', 'ORF'),
        (b'IIU\x00', 'RW2'),
        (b'II*\x00', 'TIFF'),
        (b'MM\x00*', 'TIFF'),
        (b'BM', 'BMP'),
    )

    # Extension to format mapping
    EXTENSION_FORMATS: Dict[str, str] = {
        # Image formats
        '.jpg': 'JPEG', '.jpeg': 'JPEG', '.jpe': 'JPEG', '.jfif': 'JPEG',
        '.tif': 'TIFF', '.tiff': 'TIFF',
        '.png': 'PNG',
        '.gif': 'GIF',
        '.bmp': 'BMP',
        '.webp': 'WEBP',
        # RAW formats
        '.cr2': 'CR2', '.cr3': 'CR3',
        '.nef': 'NEF', '.nrw': 'NRW',
        '.arw': 'ARW', '.dng': 'DNG',
        '.orf': 'ORF', '.raf': 'RAF', '.rw2': 'RW2',
        '.pef': 'PEF', '.srw': 'SRW',
    }

    MIME_TYPES: Dict[str, str] = {
        'JPEG': 'image/jpeg',
        'PNG': 'image/png',
        'GIF': 'image/gif',
        'WEBP': 'image/webp',
        'BMP': 'image/bmp',
        'TIFF': 'image/tiff',
        'CR2': 'image/x-canon-cr2',
        'CR3': 'image/x-canon-cr3',
        'NEF': 'image/x-nikon-nef',
        'NRW': 'image/x-nikon-nrw',
        'ARW': 'image/x-sony-arw',
        'DNG': 'image/x-adobe-dng',
        'ORF': 'image/x-olympus-orf',
        'RAF': 'image/x-fuji-raf',
        'RW2': 'image/x-panasonic-rw2',
        'PEF': 'image/x-pentax-pef',
        'SRW': 'image/x-samsung-srw',
    }

    RAW_FORMATS = frozenset({
        'CR2', 'CR3', 'NEF', 'NRW', 'ARW', 'DNG', 'ORF', 'RAF', 'RW2', 'PEF', 'SRW',
    })

    @classmethod
    def detect_from_signature(cls, file_data: bytes) -> Optional[str]:
        if not file_data:
            return None
        for signature, format_name in cls.FORMAT_SIGNATURES:
            if file_data.startswith(signature):
                if format_name == 'TIFF' and file_data[8:10] == b'CR':
                    return 'CR2'
                return format_name
        if file_data[:4] == b'RIFF' and file_data[8:12] == b'WEBP':
            return 'WEBP'
        if file_data[4:8] == b'ftyp' and file_data[8:12] == b'crx ':
            return 'CR3'
        return None

    @classmethod
    def detect_format(cls, file_path: Optional[str] = None, file_data: Optional[bytes] = None) -> Optional[str]:
        """
        Detect file format from file data and/or path.

        Args:
            file_path: Path or file name
            file_data: File data (at least the first 16 bytes)

        Returns:
            Format name or None if not detected
        """
        by_extension = None
        if file_path:
            by_extension = cls.EXTENSION_FORMATS.get(Path(file_path).suffix.lower())

        by_signature = cls.detect_from_signature(file_data) if file_data else None

        # NEF, ARW, DNG, PEF, SRW are plain TIFF on the outside
        if by_signature == 'TIFF' and by_extension in cls.RAW_FORMATS:
            return by_extension
        return by_signature or by_extension

    @classmethod
    def is_raw_format(cls, format_name: Optional[str]) -> bool:
        return bool(format_name) and format_name.upper() in cls.RAW_FORMATS

    @classmethod
    def is_supported_format(cls, format_name: Optional[str]) -> bool:
        """
        Check if format is supported for metadata extraction.

        Args:
            format_name: Format name

        Returns:
            True if format is supported
        """
        return bool(format_name) and format_name.upper() in cls.MIME_TYPES

    @classmethod
    def get_mime_type(cls, format_name: Optional[str]) -> Optional[str]:
        if not format_name:
            return None
        return cls.MIME_TYPES.get(format_name.upper())
