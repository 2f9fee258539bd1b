"""
Reader — parser for LBX container files.

Parse steps:
  - Header check: at least 8 bytes, signature "AD FE 00 00" at offset 2
  - Type tag at offset 6 selects the entry metadata layout
  - Offset table walk: start/end per entry from slot 8 + 4*i
  - Image archives: sanitized name/comment read from the table at 512

Files are read whole into memory; there is no lazy or streaming mode.
A parse either builds the complete entry list or raises.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

from lbx import LBX_MAX_FILE_SIZE
from lbx._format.document import LBXContainer, LBXEntry
from lbx._format.sanitize import SanitizeTable
from lbx._format.spec import (
    COMMENT_LENGTH, HEADER_SIZE, NAME_LENGTH, SIGNATURE, SIGNATURE_OFFSET,
    SYNTHETIC_NAME_PREFIX, TYPE_TAG_OFFSET, ContainerType,
    comment_slot, name_slot, offset_slot, read_u16, read_u32,
)

log = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "This is not a valid LBX file."


class LBXFormatError(ValueError):
    """Container rejected by the reader."""


class LBXSignatureError(LBXFormatError):
    """Not an LBX container: fewer than 8 bytes, or the signature does not match."""


class LBXTruncatedError(LBXFormatError):
    """Container header is valid but its entry tables run past the end of the data."""


class LBXReader:
    """
    LBX container reader.

    Usage:
        container = LBXReader.read("FONTS.LBX")
        for entry in container:
            print(entry.name, entry.start, entry.end)
    """

    @staticmethod
    def is_lbx_bytes(data: bytes) -> bool:
        """Fast check: enough bytes for a header and a matching signature."""
        return (
            len(data) >= HEADER_SIZE
            and data[SIGNATURE_OFFSET:SIGNATURE_OFFSET + len(SIGNATURE)] == SIGNATURE
        )

    @staticmethod
    def is_lbx(path: str | Path) -> bool:
        """Fast check if a file is an LBX container. Reads only the header."""
        with open(path, "rb") as f:
            head = f.read(HEADER_SIZE)
        return LBXReader.is_lbx_bytes(head)

    @classmethod
    def read(cls, path: str | Path, max_size: int = LBX_MAX_FILE_SIZE) -> LBXContainer:
        """Read a whole file and parse it."""
        path = Path(path)
        file_size = path.stat().st_size
        if file_size > max_size:
            raise LBXFormatError(
                f"File size {file_size} exceeds maximum {max_size} bytes. "
                f"Pass max_size= to override."
            )
        with open(path, "rb") as f:
            data = f.read()
        return cls.parse(data)

    @classmethod
    def parse(cls, data: bytes) -> LBXContainer:
        """Parse container bytes into an LBXContainer."""
        data = bytes(data)
        if not cls.is_lbx_bytes(data):
            raise LBXSignatureError(INVALID_FORMAT_MESSAGE)

        table = SanitizeTable.instance()
        entry_count = read_u16(data, 0)
        tag = read_u16(data, TYPE_TAG_OFFSET)
        file_type = ContainerType.from_tag(tag)
        log.debug("LBX header: %d entries, type tag %d (%s)", entry_count, tag, file_type.name)

        entries: list[LBXEntry] = []
        for i in range(entry_count):
            if file_type is ContainerType.IMAGE:
                name = table.sanitize(cls._field(data, name_slot(i), NAME_LENGTH))
                comment = table.sanitize(cls._field(data, comment_slot(i), COMMENT_LENGTH))
            else:
                name = f"{SYNTHETIC_NAME_PREFIX}{i + 1}"
                comment = ""

            pos = offset_slot(i)
            try:
                start = read_u32(data, pos)
                end = read_u32(data, pos + 4)
            except struct.error:
                raise LBXTruncatedError(
                    f"Offset table truncated: entry {i} needs bytes {pos}..{pos + 8}, "
                    f"container has {len(data)}"
                ) from None

            entries.append(LBXEntry(index=i, name=name, start=start, end=end, comment=comment))

        return LBXContainer(raw=data, file_type=file_type, entries=entries)

    @staticmethod
    def _field(data: bytes, offset: int, length: int) -> bytes:
        """Fixed-width field at offset. Raises LBXTruncatedError if incomplete."""
        end = offset + length
        if end > len(data):
            raise LBXTruncatedError(
                f"Name table truncated: field needs bytes {offset}..{end}, "
                f"container has {len(data)}"
            )
        return data[offset:end]
