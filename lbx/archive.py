"""
LBXFile — loading boundary for LBX archives and the external palette.

Loaders never raise: every failure is logged and returned as
``(False, reason)`` so callers can simply try another file. A failed load
leaves the previously loaded archive (or palette) in place.

Usage:
    ok, reason = LBXFile.load_external_palette("FONTS.LBX")
    lbx = LBXFile()
    ok, reason = lbx.load("HELP.LBX")
    if ok:
        print(lbx.file_type, len(lbx.entries), lbx.get_text())
"""

from __future__ import annotations

import logging
from pathlib import Path

from lbx import LBX_MAX_FILE_SIZE
from lbx._format.document import LBXContainer, LBXEntry
from lbx._format.reader import INVALID_FORMAT_MESSAGE, LBXFormatError, LBXReader, LBXSignatureError
from lbx._format.sanitize import SanitizeTable
from lbx._format.spec import ContainerType
from lbx.palette import Palette, PaletteLoadError, current_palette, load_palette

log = logging.getLogger(__name__)


class LBXFile:
    """A loaded LBX archive.

    Until ``load`` succeeds the archive is empty: no entries, no bytes,
    type UNKNOWN.
    """

    def __init__(self, max_size: int = LBX_MAX_FILE_SIZE) -> None:
        SanitizeTable.instance()
        self.max_size = max_size
        self._container: LBXContainer | None = None

    def load(self, path: str | Path) -> tuple[bool, str | None]:
        """Load and parse an archive from disk. Returns (ok, reason)."""
        name = Path(path).name if isinstance(path, (str, Path)) else str(path)
        try:
            container = LBXReader.read(path, max_size=self.max_size)
        except LBXSignatureError:
            reason = INVALID_FORMAT_MESSAGE
        except LBXFormatError as e:
            reason = f"Failed to load LBX File {name}: {e}"
        except OSError as e:
            reason = f"Failed to load LBX File {name}: {e.strerror or e}"
        except (ValueError, TypeError) as e:
            # pathlib rejects malformed paths (embedded NUL) with ValueError
            reason = f"Failed to load LBX File {name}: {e}"
        else:
            self._container = container
            log.debug("Loaded %s: %s, %d entries", path, container.file_type.name, len(container))
            return True, None

        log.warning("%s", reason)
        return False, reason

    def load_bytes(self, data: bytes, name: str = "<memory>") -> tuple[bool, str | None]:
        """Parse an archive already in memory. Returns (ok, reason)."""
        try:
            container = LBXReader.parse(data)
        except LBXSignatureError:
            reason = INVALID_FORMAT_MESSAGE
        except LBXFormatError as e:
            reason = f"Failed to load LBX File {name}: {e}"
        else:
            self._container = container
            return True, None

        log.warning("%s", reason)
        return False, reason

    @property
    def container(self) -> LBXContainer | None:
        return self._container

    @property
    def entries(self) -> list[LBXEntry]:
        if self._container is None:
            return []
        return self._container.entries

    @property
    def file_type(self) -> ContainerType:
        if self._container is None:
            return ContainerType.UNKNOWN
        return self._container.file_type

    @property
    def raw(self) -> bytes:
        if self._container is None:
            return b""
        return self._container.raw

    def get_text(self) -> str:
        """Text of the first entry, or "" if nothing is loaded or the archive is empty."""
        if self._container is None:
            return ""
        return self._container.get_text()

    @staticmethod
    def load_external_palette(path: str | Path) -> tuple[bool, str | None]:
        """Load the process palette from a resource file. Returns (ok, reason)."""
        try:
            load_palette(path)
        except PaletteLoadError as e:
            reason = f"Failed to load external palette: {e}"
            log.warning("%s", reason)
            return False, reason
        return True, None

    @staticmethod
    def external_palette() -> Palette | None:
        return current_palette()
