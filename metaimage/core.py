# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core MetaImage class

This module provides the main API for inspecting an image file: format
validation, pixel dimensions, EXIF metadata, and the embedded JPEG
preview of RAW files.

Copyright 2025 DNAi inc.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from metaimage.dimensions import aspect_ratio, jpeg_dimensions, megapixels, read_dimensions
from metaimage.exceptions import FileValidationError
from metaimage.exif_parser import ExifParser, ParseStatus, find_jpeg_exif, parse_tiff
from metaimage.file_validator import MAX_FILE_SIZE, check_file_size, validate_file, verify_decodable
from metaimage.format_detector import FormatDetector
from metaimage.geolocation import gps_coordinates
from metaimage.raw_preview import MIN_PREVIEW_SIZE, PreviewSpan, RawPreviewExtractor
from metaimage.thumbnail_extractor import find_thumbnail
from metaimage.value_formatter import format_bytes, group_metadata

logger = logging.getLogger(__name__)


class MetaImage:
    """
    Main class for reading metadata from an image file.

    Everything is loaded when the object is created. Files that fail
    validation raise; damaged metadata only yields fewer fields.

    Example:
        >>> with MetaImage('photo.jpg') as image:
        ...     metadata = image.get_all_metadata()
        ...     camera = image.get_tag('Make')
        ...     coords = image.get_gps_coordinates()
    """

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        file_data: Optional[bytes] = None,
        file_name: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize MetaImage with a file path or in-memory data.

        Args:
            file_path: Path to the image file
            file_data: File contents (alternative to file_path)
            file_name: File name used for extension-based detection when
                file_data is given
            options: Option overrides, see _initialize_default_options()

        Raises:
            ValueError: If neither file_path nor file_data is provided
            FileNotFoundError: If the file does not exist
            UnsupportedFormatError: If the file format is not supported
            FileValidationError: If the file is empty, too large or corrupt
        """
        if file_path is None and file_data is None:
            raise ValueError("Either file_path or file_data must be provided")

        self.file_path = Path(file_path) if file_path is not None else None
        self.file_name = file_name or (self.file_path.name if self.file_path else None)
        self.file_data = file_data
        self.modified: Optional[datetime] = None

        self.options: Dict[str, Any] = {}
        self._initialize_default_options()
        for name, value in (options or {}).items():
            self.set_option(name, value)

        self.format: Optional[str] = None
        self.mime_type: Optional[str] = None
        self.is_raw = False
        self.metadata: Dict[str, Any] = {}
        self.exif_status: Optional[ParseStatus] = None
        self.dimensions: Optional[Tuple[int, int]] = None
        self.preview_span: Optional[PreviewSpan] = None
        self._exif_tiff: Optional[bytes] = None

        self._load()

    def _initialize_default_options(self) -> None:
        self.options = {
            'MaxFileSize': MAX_FILE_SIZE,
            'MinPreviewSize': MIN_PREVIEW_SIZE,
            'VerifyImage': True,
        }

    def set_option(self, option_name: str, value: Any) -> None:
        """
        Set an option.

        Raises:
            ValueError: If the option name is unknown
        """
        if option_name not in self.options:
            raise ValueError(
                f"Unknown option: {option_name}. Valid options: {', '.join(sorted(self.options))}"
            )
        self.options[option_name] = value

    def get_option(self, option_name: str, default: Any = None) -> Any:
        return self.options.get(option_name, default)

    def _read_file_data(self) -> bytes:
        if not self.file_path.exists():
            raise FileNotFoundError(f"File not found: {self.file_path}")

        stat = self.file_path.stat()
        # Size ceiling is checked before the file is read
        check_file_size(stat.st_size, self.get_option('MaxFileSize'))
        self.modified = datetime.fromtimestamp(stat.st_mtime)

        with open(self.file_path, 'rb') as f:
            return f.read()

    def _load(self) -> None:
        if self.file_data is None:
            self.file_data = self._read_file_data()

        self.format = validate_file(
            self.file_data,
            self.file_name,
            max_size=self.get_option('MaxFileSize'),
            verify=self.get_option('VerifyImage'),
        )
        self.mime_type = FormatDetector.get_mime_type(self.format)
        self.is_raw = FormatDetector.is_raw_format(self.format)

        if self.is_raw:
            self._load_raw()
        else:
            parser = ExifParser(self.file_data)
            self.metadata = parser.read()
            self.exif_status = parser.status
            self._exif_tiff = parser.tiff_data
            self.dimensions = read_dimensions(self.file_data, self.format, self.metadata)

        logger.debug(
            f"Loaded {self.file_name or '<data>'}: format={self.format}, "
            f"{len(self.metadata)} fields, exif={self.exif_status}"
        )

    def _load_raw(self) -> None:
        """
        Locate the preview JPEG, then read metadata from the container
        (when it is TIFF based) and from the preview.
        """
        extractor = RawPreviewExtractor(self.file_data, self.get_option('MinPreviewSize'))
        self.preview_span = extractor.find_largest_jpeg()
        preview = self.preview_span.slice(self.file_data) if self.preview_span else None

        if preview is not None and self.get_option('VerifyImage'):
            try:
                verify_decodable(preview)
            except FileValidationError:
                logger.debug("Embedded preview does not decode, treating as absent")
                self.preview_span = preview = None

        result = parse_tiff(self.file_data)
        self.metadata = result.metadata
        self.exif_status = result.status
        if result.status == ParseStatus.OK:
            self._exif_tiff = self.file_data

        if preview is not None:
            preview_tiff = find_jpeg_exif(preview)
            if preview_tiff is not None:
                preview_result = parse_tiff(preview_tiff)
                for key, value in preview_result.metadata.items():
                    self.metadata.setdefault(key, value)
                if self.exif_status != ParseStatus.OK:
                    self.exif_status = preview_result.status
                    self._exif_tiff = preview_tiff
            self.dimensions = jpeg_dimensions(preview)

        if self.dimensions is None:
            self.dimensions = read_dimensions(self.file_data, self.format, self.metadata)

    def get_all_metadata(self) -> Dict[str, Any]:
        """Return a copy of the metadata record."""
        return dict(self.metadata)

    def get_tag(self, tag_name: str, default: Any = None) -> Any:
        return self.metadata.get(tag_name, default)

    def has_tag(self, tag_name: str) -> bool:
        return tag_name in self.metadata

    def get_gps_coordinates(self) -> Optional[Tuple[float, float]]:
        """(latitude, longitude) in decimal degrees, or None."""
        return gps_coordinates(self.metadata)

    def get_dimensions(self) -> Dict[str, Any]:
        """
        Get pixel dimensions with derived aspect ratio and megapixels.

        Returns:
            Dictionary with Width, Height, AspectRatio and Megapixels,
            or an empty dictionary if the dimensions are unknown
        """
        if not self.dimensions:
            return {}
        width, height = self.dimensions
        return {
            'Width': width,
            'Height': height,
            'AspectRatio': aspect_ratio(width, height),
            'Megapixels': megapixels(width, height),
        }

    def get_file_info(self) -> Dict[str, Any]:
        info = {
            'FileName': self.file_name,
            'Format': self.format,
            'MIMEType': self.mime_type,
            'FileSize': len(self.file_data),
            'FileSizeFormatted': format_bytes(len(self.file_data)),
        }
        if self.modified is not None:
            info['FileModifyDate'] = self.modified.isoformat(sep=' ', timespec='seconds')
        return info

    def get_preview_span(self) -> Optional[PreviewSpan]:
        return self.preview_span

    def get_preview(self) -> Optional[bytes]:
        """
        Get the displayable JPEG for a RAW file.

        Returns:
            Preview bytes, or None when the file is not RAW or no
            preview was found (the image cannot be displayed)
        """
        if self.preview_span is None:
            return None
        return self.preview_span.slice(self.file_data)

    def get_thumbnail(self) -> Optional[bytes]:
        """Get the IFD1 JPEG thumbnail, if the EXIF data has one."""
        if self._exif_tiff is None:
            return None
        span = find_thumbnail(self._exif_tiff)
        if span is None:
            return None
        return span.slice(self._exif_tiff)

    def get_summary(self) -> Dict[str, Any]:
        """
        Get everything needed to present the file.

        Returns:
            Dictionary with 'file', 'dimensions', 'metadata' (grouped
            rows), 'gps' coordinates and 'previewable'
        """
        return {
            'file': self.get_file_info(),
            'dimensions': self.get_dimensions(),
            'metadata': group_metadata(self.metadata),
            'gps': self.get_gps_coordinates(),
            'previewable': (not self.is_raw) or self.preview_span is not None,
        }

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        pass
