"""Shared fixtures: synthesize LBX containers in memory."""

from __future__ import annotations

import struct

import pytest

SIGNATURE = b"\xad\xfe\x00\x00"


def build_lbx(
    payloads: list[bytes],
    type_tag: int = 5,
    names: list[tuple[bytes, bytes]] | None = None,
) -> bytes:
    """Build a well-formed container.

    The offset table holds len(payloads) + 1 consecutive slots, so entry i
    spans slot i to slot i + 1. Image containers (type_tag 0) get a name
    table at 512 and their payloads start after it.
    """
    count = len(payloads)
    header = struct.pack("<H4sH", count, SIGNATURE, type_tag)
    table_end = 8 + 4 * (count + 1)
    data_start = table_end
    if type_tag == 0:
        data_start = max(512 + 32 * count, table_end)

    offsets = [data_start]
    for payload in payloads:
        offsets.append(offsets[-1] + len(payload))
    table = b"".join(struct.pack("<I", off) for off in offsets)

    buf = bytearray(header + table)
    buf.extend(b"\x00" * (data_start - len(buf)))
    if type_tag == 0:
        names = names or [(f"N{i}".encode(), f"comment {i}".encode()) for i in range(count)]
        for i, (name, comment) in enumerate(names):
            pos = 512 + 32 * i
            buf[pos:pos + 8] = name.ljust(8, b"\x00")[:8]
            buf[pos + 8:pos + 32] = comment.ljust(24, b"\x00")[:24]
    for payload in payloads:
        buf.extend(payload)
    return bytes(buf)


@pytest.fixture
def make_lbx():
    return build_lbx


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Reset the process-wide sanitize table and palette around every test."""
    from lbx._format.sanitize import SanitizeTable
    from lbx.palette import reset_palette

    SanitizeTable.reset()
    reset_palette()
    yield
    SanitizeTable.reset()
    reset_palette()
