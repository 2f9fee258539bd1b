"""
External palette — the 256-colour RGB table image archives are drawn with.

The palette is not stored in the image archives themselves. It is read
from a fixed offset inside a separate resource file (FONTS.LBX):

    [13444 .. 13444 + 768)   256 x (R, G, B), one byte per channel

One palette is held per process. Each successful load replaces it
wholesale; nothing checks that it matches any particular container.

Rendering a swatch needs Pillow, which is lazily imported.
Install with: pip install lbx-toolkit[image]
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from lbx import PALETTE_COLORS, PALETTE_OFFSET, PALETTE_SIZE

log = logging.getLogger(__name__)

SWATCH_CELL = 16  # pixels per colour cell in a rendered swatch
SWATCH_COLUMNS = 16


class PaletteLoadError(Exception):
    """Palette source unreadable or too short."""


def _import_pillow():
    """Lazily import Pillow's Image module.

    Raises ImportError with a helpful message if not installed.
    """
    try:
        from PIL import Image

        return Image
    except ImportError:
        raise ImportError(
            "Pillow is required to render palettes. "
            "Install with: pip install lbx-toolkit[image]"
        )


@dataclass(frozen=True)
class Palette:
    """256 RGB triples in table order.

    Attributes:
        colors: Tuple of (r, g, b) tuples, each channel 0-255.
    """

    colors: tuple[tuple[int, int, int], ...]

    @classmethod
    def from_bytes(cls, data: bytes) -> Palette:
        """Build from exactly 768 packed RGB bytes."""
        if len(data) != PALETTE_SIZE:
            raise PaletteLoadError(
                f"Palette must be {PALETTE_SIZE} bytes, got {len(data)}"
            )
        colors = tuple(
            (data[i], data[i + 1], data[i + 2]) for i in range(0, PALETTE_SIZE, 3)
        )
        return cls(colors)

    def to_bytes(self) -> bytes:
        return bytes(channel for rgb in self.colors for channel in rgb)

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> tuple[int, int, int]:
        return self.colors[index]

    def render(self, path: str | Path, cell: int = SWATCH_CELL) -> Path:
        """Write a 16x16 grid of colour cells as an image. Returns the path."""
        Image = _import_pillow()

        rows = (len(self.colors) + SWATCH_COLUMNS - 1) // SWATCH_COLUMNS
        img = Image.new("RGB", (SWATCH_COLUMNS * cell, rows * cell), color=(0, 0, 0))
        for i, rgb in enumerate(self.colors):
            x = (i % SWATCH_COLUMNS) * cell
            y = (i // SWATCH_COLUMNS) * cell
            img.paste(rgb, (x, y, x + cell, y + cell))

        path = Path(path)
        img.save(path)
        return path


def extract_palette(data: bytes) -> Palette:
    """Cut the palette out of a resource file's bytes.

    Raises PaletteLoadError if the buffer ends before offset + 768.
    """
    needed = PALETTE_OFFSET + PALETTE_SIZE
    if len(data) < needed:
        raise PaletteLoadError(
            f"Palette source too short: need {needed} bytes, got {len(data)}"
        )
    return Palette.from_bytes(bytes(data[PALETTE_OFFSET:needed]))


# ---------------------------------------------------------------------------
# Process-wide palette slot
# ---------------------------------------------------------------------------

_current: Palette | None = None
_lock = threading.Lock()


def install_palette(palette: Palette) -> None:
    """Replace the process palette (last load wins)."""
    global _current
    with _lock:
        _current = palette


def current_palette() -> Palette | None:
    return _current


def reset_palette() -> None:
    """Clear the process palette. Only meant for tests."""
    global _current
    with _lock:
        _current = None


def load_palette(path: str | Path) -> Palette:
    """Read a resource file, extract its palette and install it.

    Raises PaletteLoadError on I/O faults or a short file. The installed
    palette is left unchanged on failure.
    """
    try:
        path = Path(path)
        data = path.read_bytes()
    except (OSError, ValueError, TypeError) as e:
        raise PaletteLoadError(f"Cannot read {path}: {e}") from e

    palette = extract_palette(data)
    install_palette(palette)
    log.debug("Loaded palette from %s (%d colours)", path, PALETTE_COLORS)
    return palette
