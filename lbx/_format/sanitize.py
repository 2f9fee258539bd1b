"""
Text sanitizer for fixed-width name/comment fields.

Image archives store entry names and comments as raw, space- or NUL-padded
byte fields. Only digits, ASCII letters, '.', ',' and ' ' are kept; every
other byte becomes a space so the field keeps its width.

The classification table is built once per process, on first use.
"""

from __future__ import annotations

import string
import threading

TABLE_SIZE = 256
PRINTABLE_CHARS = string.digits + string.ascii_uppercase + string.ascii_lowercase + ".," + " "
REPLACEMENT = " "


class SanitizeTable:
    """Process-wide byte classification table (lazy, built once).

    Usage:
        table = SanitizeTable.instance()
        table.is_printable(0x41)  # True
    """

    _instance: SanitizeTable | None = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        flags = [False] * TABLE_SIZE
        for ch in PRINTABLE_CHARS:
            flags[ord(ch)] = True
        self._flags: tuple[bool, ...] = tuple(flags)

    @classmethod
    def instance(cls) -> SanitizeTable:
        """Return the shared table, building it on first call."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def is_built(cls) -> bool:
        return cls._instance is not None

    @classmethod
    def reset(cls) -> None:
        """Drop the shared table. Only meant for tests."""
        with cls._lock:
            cls._instance = None

    def is_printable(self, value: int) -> bool:
        if 0 <= value < TABLE_SIZE:
            return self._flags[value]
        return False

    def sanitize(self, raw: bytes | str) -> str:
        """Replace non-printable bytes (or characters) with spaces."""
        if isinstance(raw, str):
            return "".join(c if self.is_printable(ord(c)) else REPLACEMENT for c in raw)
        return "".join(chr(b) if self._flags[b] else REPLACEMENT for b in raw)


def is_printable(value: int) -> bool:
    """Classify a byte value using the shared table."""
    return SanitizeTable.instance().is_printable(value)


def sanitize(raw: bytes | str) -> str:
    """Sanitize a fixed-width field using the shared table."""
    return SanitizeTable.instance().sanitize(raw)
