# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Embedded JPEG preview locator for RAW containers

RAW files usually embed several JPEGs (a small thumbnail, sometimes a
medium preview, and a full-size preview). The full-size preview is
conventionally the largest contiguous JPEG, so the scan keeps the
largest span between a start-of-image and end-of-image marker.

The heuristic is marker based only. A start marker stays pending until
a span is selected, so the span starts at the last SOI before the
chosen EOI. When the preview's own APP1 segment embeds an IFD1
thumbnail, that thumbnail's SOI comes after the preview's, and the
returned span starts at the thumbnail instead of the preview. Unrelated
bytes that happen to contain FFD8 ... FFD9 can also be selected.

Copyright 2025 DNAi inc.
"""

import logging
import re
from typing import NamedTuple, Optional

from metaimage.exceptions import NoPreviewFoundError

logger = logging.getLogger(__name__)

MIN_PREVIEW_SIZE = 10000

JPEG_SOI = b'\xff\xd8'
JPEG_EOI = b'\xff\xd9'

# FF D8 and FF D9 can never overlap, so non-overlapping matches see every marker
_MARKER_PATTERN = re.compile(b'\xff[\xd8\xd9]')


class PreviewSpan(NamedTuple):
    """Byte range [start, end) of an embedded JPEG"""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, file_data: bytes) -> bytes:
        return bytes(file_data[self.start:self.end])


def extract_largest_jpeg(file_data: bytes, min_size: int = MIN_PREVIEW_SIZE) -> Optional[PreviewSpan]:
    """
    Find the largest JPEG span in a buffer.

    The most recent unmatched start marker is tracked. When an end
    marker follows it, the span (end marker included) becomes the best
    candidate if it is longer than both the best so far and min_size,
    and the pending start is cleared.

    Args:
        file_data: RAW container bytes
        min_size: Spans must be longer than this many bytes

    Returns:
        PreviewSpan of the best span, or None if none qualified
    """
    best: Optional[PreviewSpan] = None
    pending_start: Optional[int] = None

    for match in _MARKER_PATTERN.finditer(file_data):
        if match.group() == JPEG_SOI:
            pending_start = match.start()
        elif pending_start is not None:
            candidate = PreviewSpan(pending_start, match.end())
            best_length = best.length if best else 0
            if candidate.length > best_length and candidate.length > min_size:
                best = candidate
                pending_start = None

    return best


class RawPreviewExtractor:
    """
    Extracts the embedded JPEG preview from a RAW container.
    """

    def __init__(self, file_data: bytes, min_size: int = MIN_PREVIEW_SIZE):
        """
        Args:
            file_data: RAW file bytes
            min_size: Minimum preview size in bytes
        """
        self.file_data = file_data
        self.min_size = min_size

    def find_largest_jpeg(self) -> Optional[PreviewSpan]:
        span = extract_largest_jpeg(self.file_data, self.min_size)
        if span is None:
            logger.debug(f"No JPEG span larger than {self.min_size} bytes in {len(self.file_data)} bytes")
        else:
            logger.debug(f"Preview JPEG at [{span.start}, {span.end}) ({span.length} bytes)")
        return span

    def extract(self) -> bytes:
        """
        Return the preview JPEG bytes.

        Raises:
            NoPreviewFoundError: If no span met the size threshold
        """
        span = self.find_largest_jpeg()
        if span is None:
            raise NoPreviewFoundError(
                f"No embedded JPEG preview larger than {self.min_size} bytes found"
            )
        return span.slice(self.file_data)
