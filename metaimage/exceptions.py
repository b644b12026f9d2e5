# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for metaimage

Decoding errors (out-of-bounds reads, unsupported value types, unknown
containers) are raised inside the engine and absorbed at the entry or
container level. Only the errors about the file as a whole reach callers.

Copyright 2025 DNAi inc.
"""

from typing import Optional


class MetaImageError(Exception):
    """
    Base exception for all metaimage errors.

    All metaimage exceptions inherit from this class, allowing
    catch-all error handling for any metaimage-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(MetaImageError):
    """
    Raised when a metadata structure cannot be decoded.

    Subclasses describe the failure more precisely. The IFD walker
    catches these per entry, so they never escape a parse.
    """
    pass


class OutOfBoundsError(MetadataReadError):
    """
    Raised when a read would run past the end of the buffer.

    This exception is raised when:
    - An offset is negative
    - offset + size exceeds the buffer length
    """
    def __init__(self, offset: int, size: int, length: int):
        self.offset = offset
        self.size = size
        self.length = length
        super().__init__(
            f"Read of {size} bytes at offset {offset} exceeds buffer length {length}"
        )


class UnsupportedTypeError(MetadataReadError):
    """
    Raised when a tag uses a type/count combination that is not decoded.
    """
    def __init__(self, tag_type: int, count: int, message: Optional[str] = None):
        self.tag_type = tag_type
        self.count = count
        super().__init__(message or f"Unsupported value type {tag_type} with count {count}")


class InvalidContainerError(MetadataReadError):
    """
    Raised when a buffer does not start with a TIFF byte-order marker.

    This is the only decoding failure that aborts a whole parse; the
    TIFF entry point turns it into an empty result.
    """
    pass


class NoPreviewFoundError(MetaImageError):
    """
    Raised when a RAW container holds no JPEG preview above the size threshold.
    """
    pass


class UnsupportedFormatError(MetaImageError):
    """
    Raised when the file format is not supported.

    This exception is raised when:
    - File signature does not match any known image format
    - File extension is not in the supported formats list
    """
    pass


class FileValidationError(MetaImageError):
    """
    Raised when a file fails validation before metadata extraction.

    This exception is raised when:
    - File is empty
    - File size exceeds the configured ceiling
    - Image data cannot be decoded
    """
    pass
