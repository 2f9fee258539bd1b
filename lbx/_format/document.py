"""
Parsed container model — the result of ``LBXReader.parse``.

An ``LBXContainer`` owns the raw bytes it was parsed from and the ordered
entry list. Entries only describe where their payload lives; nothing is
sliced or validated until a caller asks for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lbx._format.spec import ContainerType

# Text payloads are DOS-era; CP437 maps every byte to a character
TEXT_ENCODING = "cp437"


@dataclass
class LBXEntry:
    """One sub-file of a container.

    Attributes:
        index: Position in the entry table (0-based).
        name: Sanitized 8-char name for image archives, "File <n>" otherwise.
        comment: Sanitized 24-char comment (image archives only).
        start: Absolute start offset of the payload, as decoded.
        end: Absolute end offset of the payload, as decoded.
    """

    index: int
    name: str
    start: int
    end: int
    comment: str = ""

    @property
    def size(self) -> int:
        """Payload length implied by the offsets (negative if start > end)."""
        return self.end - self.start

    def payload(self, container: LBXContainer) -> bytes:
        """Slice this entry's payload out of the container buffer.

        Uses plain slicing, so spans reaching past the buffer are truncated
        and an inverted span yields b"".
        """
        return container.raw[self.start:self.end]

    def get_text(self, container: LBXContainer) -> str:
        """Decode the payload as text, dropping trailing NUL padding."""
        return self.payload(container).rstrip(b"\x00").decode(TEXT_ENCODING)


@dataclass
class LBXContainer:
    """A parsed LBX archive."""

    raw: bytes
    file_type: ContainerType
    entries: list[LBXEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def get_entry(self, index: int) -> LBXEntry | None:
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def find(self, name: str) -> LBXEntry | None:
        """Find the first entry whose stripped name matches (case-insensitive)."""
        wanted = name.strip().lower()
        for entry in self.entries:
            if entry.name.strip().lower() == wanted:
                return entry
        return None

    def payload(self, index: int) -> bytes:
        """Payload bytes of entry index. Raises IndexError for a bad index."""
        entry = self.get_entry(index)
        if entry is None:
            raise IndexError(f"No entry {index} (container has {len(self.entries)})")
        return entry.payload(self)

    def get_text(self) -> str:
        """Text of the first entry, or "" for an empty container."""
        if self.entries:
            return self.entries[0].get_text(self)
        return ""

    def check_bounds(self) -> list[str]:
        """Opt-in offset validation. Returns a list of problems (empty if clean).

        Parsing never rejects a container for bad offsets; callers that
        want strictness call this.
        """
        problems: list[str] = []
        size = len(self.raw)
        for entry in self.entries:
            if entry.start > entry.end:
                problems.append(
                    f"entry {entry.index} ({entry.name.strip()}): "
                    f"start {entry.start} is after end {entry.end}"
                )
            if entry.end > size:
                problems.append(
                    f"entry {entry.index} ({entry.name.strip()}): "
                    f"end {entry.end} is past end of file ({size} bytes)"
                )
        return problems
