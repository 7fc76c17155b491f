"""Tag scanning over an explicit, caller-owned cursor.

The scanner walks the source text and yields ``(leading text, tag content)``
units. The cursor is a plain value passed to every call, so the classifier can
keep consuming "up to the next ``>``" chunks for constructs such as comments
and CDATA sections, and the main loop resumes after the whole construct.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional

# Text before a tag (non-greedy), then the tag's bracket interior
TAG_PATTERN = re.compile(r"([^<]*?)<([^>]+)>")

# Everything up to and including the next closing bracket
NEXT_CLOSE_PATTERN = re.compile(r"([^>]*?)>")


@dataclass
class ScanCursor:
    """Read position within a source text."""

    text: str
    position: int = 0

    def __post_init__(self) -> None:
        if not (0 <= self.position <= len(self.text)):
            raise ValueError("Cursor position out of range")

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.text)

    @property
    def remaining(self) -> str:
        return self.text[self.position:]


@dataclass(frozen=True)
class ScannedTag:
    """One scanned unit: the text before a tag and the tag's interior."""

    leading_text: str
    content: str
    start: int
    end: int


class TagScanner:
    """Finds tags and closing-bracket chunks, advancing a :class:`ScanCursor`."""

    def next_tag(self, cursor: ScanCursor) -> Optional[ScannedTag]:
        """Scan the next tag at or after the cursor.

        Returns ``None`` when no further tag exists; the cursor is then left
        unchanged.
        """
        match = TAG_PATTERN.search(cursor.text, cursor.position)
        if match is None:
            return None

        cursor.position = match.end()
        return ScannedTag(
            leading_text=match.group(1),
            content=match.group(2),
            start=match.start(),
            end=match.end(),
        )

    def next_chunk(self, cursor: ScanCursor) -> Optional[str]:
        """Return the text up to the next ``>`` and move past that bracket."""
        match = NEXT_CLOSE_PATTERN.match(cursor.text, cursor.position)
        if match is None:
            return None

        cursor.position = match.end()
        return match.group(1)

    def iter_tags(self, cursor: ScanCursor) -> Iterator[ScannedTag]:
        """Yield scanned tags until the input is exhausted.

        The cursor is re-read on every step, so a consumer may advance it
        between iterations.
        """
        while True:
            scanned = self.next_tag(cursor)
            if scanned is None:
                return
            yield scanned
