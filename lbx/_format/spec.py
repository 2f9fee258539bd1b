"""
Container layout — LBX archives.

Layout (all integers little-endian):
    [0..2)    entry count                 uint16
    [2..6)    signature                   AD FE 00 00
    [6..8)    type tag                    uint16 (0 = image, 5 = text)
    [8..)     offset table                uint32 per slot, entry i reads
                                          start at 8 + 4*i and end at
                                          8 + 4*i + 4
    [512..)   image name table            32 bytes per entry:
                                          8-byte name + 24-byte comment

Offset table:
    - Slots are 4 bytes apart; an entry's end offset is the slot right
      after its start offset, so consecutive entries share a slot
    - Decoded offsets are absolute positions in the container buffer
    - Offsets are stored as decoded, bounds are checked only on request
"""

from __future__ import annotations

import enum
import struct

from lbx import LBX_SIGNATURE

# Header
HEADER_SIZE = 8
SIGNATURE = LBX_SIGNATURE
SIGNATURE_OFFSET = 2
TYPE_TAG_OFFSET = 6

# Offset table
OFFSET_TABLE_START = 8
OFFSET_TABLE_STRIDE = 4

# Image name table
NAME_TABLE_START = 512
COMMENT_TABLE_START = 520
NAME_RECORD_STRIDE = 32
NAME_LENGTH = 8
COMMENT_LENGTH = 24

# Name used for entries of archives that carry no name table
SYNTHETIC_NAME_PREFIX = "File "

U16 = struct.Struct("<H")
U32 = struct.Struct("<I")


class ContainerType(enum.IntEnum):
    """Container-wide file type, selected by the header type tag."""

    IMAGE = 0
    TEXT = 5
    UNKNOWN = -1

    @classmethod
    def from_tag(cls, tag: int) -> ContainerType:
        """Map a raw type tag to a ContainerType. Unrecognized tags are UNKNOWN."""
        if tag == cls.IMAGE:
            return cls.IMAGE
        if tag == cls.TEXT:
            return cls.TEXT
        return cls.UNKNOWN


def read_u16(data: bytes, offset: int) -> int:
    """Read a little-endian uint16 (low byte first) at offset."""
    return U16.unpack_from(data, offset)[0]


def read_u32(data: bytes, offset: int) -> int:
    """Read a little-endian uint32 at offset: b0 + b1*256 + b2*65536 + b3*16777216."""
    return U32.unpack_from(data, offset)[0]


def offset_slot(index: int) -> int:
    """Position of the start offset for entry index."""
    return OFFSET_TABLE_START + index * OFFSET_TABLE_STRIDE


def name_slot(index: int) -> int:
    return NAME_TABLE_START + index * NAME_RECORD_STRIDE


def comment_slot(index: int) -> int:
    return COMMENT_TABLE_START + index * NAME_RECORD_STRIDE
