# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IFD (Image File Directory) walker

Walks the main IFD of a TIFF stream and the Exif and GPS sub-IFDs it
points to, decoding every catalogued entry into one flat record.

Directories are processed from a work-list. Each directory offset is
visited at most once per parse, so self-referencing or mutually
referencing pointers terminate. Per-entry failures are absorbed: a
corrupt or truncated directory yields whatever entries were readable.

Copyright 2025 DNAi inc.
"""

import logging
from collections import deque
from typing import Any, Dict, Optional, Set

from metaimage.byte_reader import ByteReader
from metaimage.exceptions import MetadataReadError
from metaimage.exif_tags import IFDNamespace, POINTER_TAGS, lookup_tag
from metaimage.value_decoder import decode_value

logger = logging.getLogger(__name__)

IFD_ENTRY_SIZE = 12
MAX_IFD_ENTRIES = 1000
MAX_IFDS = 16
MAX_IFD_DEPTH = 4


class IFDWalker:
    """
    Walks IFDs over a ByteReader and accumulates a metadata record.

    Example:
        >>> walker = IFDWalker(ByteReader(tiff_data, '<'))
        >>> record = walker.walk(8)
        >>> record.get('Make')
    """

    def __init__(
        self,
        reader: ByteReader,
        max_entries: int = MAX_IFD_ENTRIES,
        max_ifds: int = MAX_IFDS,
        max_depth: int = MAX_IFD_DEPTH,
    ):
        self.reader = reader
        self.max_entries = max_entries
        self.max_ifds = max_ifds
        self.max_depth = max_depth

    def walk(
        self,
        ifd_offset: int,
        record: Optional[Dict[str, Any]] = None,
        visited: Optional[Set[int]] = None,
        namespace: IFDNamespace = IFDNamespace.MAIN,
    ) -> Dict[str, Any]:
        """
        Walk the IFD at ifd_offset and every sub-IFD reachable from it.

        Args:
            ifd_offset: Offset of the first IFD within the buffer
            record: Record to merge results into (a new dict if None)
            visited: Offsets already walked in this parse (updated in place)
            namespace: Catalog namespace of the first IFD

        Returns:
            The record. Later writes for the same key win.
        """
        if record is None:
            record = {}
        if visited is None:
            visited = set()

        pending = deque([(ifd_offset, namespace, 0)])
        while pending:
            offset, ns, depth = pending.popleft()
            if offset in visited:
                logger.debug(f"IFD at offset {offset} already visited, skipping")
                continue
            if len(visited) >= self.max_ifds:
                logger.debug(f"IFD limit of {self.max_ifds} reached, stopping walk")
                break
            visited.add(offset)

            for pointer_offset, sub_ns in self._read_directory(offset, ns, record):
                if depth + 1 > self.max_depth:
                    logger.debug(f"Sub-IFD at {pointer_offset} exceeds depth {self.max_depth}")
                    continue
                if pointer_offset not in visited:
                    pending.append((pointer_offset, sub_ns, depth + 1))

        return record

    def _read_directory(self, ifd_offset: int, namespace: IFDNamespace, record: Dict[str, Any]):
        """
        Decode one directory into record.

        Returns:
            List of (offset, namespace) sub-IFD pointers found in the directory
        """
        pointers = []
        try:
            num_entries = self.reader.u16(ifd_offset)
        except MetadataReadError:
            logger.debug(f"IFD offset {ifd_offset} is outside the buffer")
            return pointers

        if num_entries > self.max_entries:
            logger.debug(f"IFD at {ifd_offset} declares {num_entries} entries, reading {self.max_entries}")
            num_entries = self.max_entries

        entry_offset = ifd_offset + 2
        for i in range(num_entries):
            try:
                self.reader.check(entry_offset, IFD_ENTRY_SIZE)
            except MetadataReadError:
                logger.debug(f"IFD at {ifd_offset} truncated after {i} of {num_entries} entries")
                break

            tag_id = self.reader.u16(entry_offset)
            tag_type = self.reader.u16(entry_offset + 2)
            count = self.reader.u32(entry_offset + 4)
            field_offset = entry_offset + 8

            if tag_id in POINTER_TAGS:
                pointer = self.reader.u32(field_offset)
                if pointer:
                    pointers.append((pointer, POINTER_TAGS[tag_id]))
            else:
                self._decode_entry(tag_id, tag_type, count, field_offset, namespace, record)

            entry_offset += IFD_ENTRY_SIZE

        return pointers

    def _decode_entry(
        self,
        tag_id: int,
        tag_type: int,
        count: int,
        field_offset: int,
        namespace: IFDNamespace,
        record: Dict[str, Any],
    ) -> None:
        tag_def = lookup_tag(tag_id, namespace)
        if tag_def is None:
            return
        if tag_type not in tag_def.types:
            logger.debug(f"{tag_def.name}: unexpected type {tag_type}, skipping")
            return

        value = decode_value(self.reader, tag_type, count, field_offset)
        if value is not None:
            record[tag_def.name] = value


def walk_ifd(
    file_data: bytes,
    ifd_offset: int,
    endian: str,
    record: Optional[Dict[str, Any]] = None,
    visited: Optional[Set[int]] = None,
) -> Dict[str, Any]:
    """
    Walk the IFD at ifd_offset of a TIFF buffer. Never raises on malformed data.

    Args:
        file_data: TIFF stream
        ifd_offset: Offset of the IFD within file_data
        endian: '<' or '>'
        record: Record to merge into
        visited: Offsets already walked in this parse

    Returns:
        The metadata record
    """
    return IFDWalker(ByteReader(file_data, endian)).walk(ifd_offset, record, visited)
