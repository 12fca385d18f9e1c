"""Visual-mode selection.

The anchor is fixed when the selection starts; the cursor owned by the View
is the moving endpoint, so every query takes the current cursor.
"""

from typing import Optional, TYPE_CHECKING

from .buffer import Location

if TYPE_CHECKING:
    from .buffer import Buffer


class Selection:
    """An anchor Location plus an active flag."""

    def __init__(self):
        self.anchor = Location()
        self.active = False

    def start_selection(self, at: Location) -> None:
        self.anchor = at.copy()
        self.active = True

    def exit(self) -> None:
        self.active = False
        self.anchor = Location()

    def normalized_range(self, cursor: Location) -> Optional[tuple[Location, Location]]:
        """Return (start, end) ordered lexicographically, or None when inactive."""
        if not self.active:
            return None
        if self.anchor <= cursor:
            return (self.anchor.copy(), cursor.copy())
        return (cursor.copy(), self.anchor.copy())

    def contains(self, cursor: Location, line_index: int, grapheme_index: int) -> bool:
        """True if the cell falls inside [start, end) of the selection."""
        selected = self.normalized_range(cursor)
        if selected is None:
            return False
        start, end = selected
        return start <= Location(line_index, grapheme_index) < end

    def line_span(self, cursor: Location, line_index: int,
                  line_length: int) -> Optional[tuple[int, int]]:
        """Selected grapheme range [start, end) within one row, if any."""
        selected = self.normalized_range(cursor)
        if selected is None:
            return None
        start, end = selected
        if line_index < start.line_index or line_index > end.line_index:
            return None
        first = start.grapheme_index if line_index == start.line_index else 0
        last = end.grapheme_index if line_index == end.line_index else line_length
        first = min(first, line_length)
        last = min(last, line_length)
        if first >= last:
            return None
        return (first, last)

    def extract_text(self, buffer: 'Buffer', cursor: Location) -> str:
        """Selected text with rows joined by newlines."""
        selected = self.normalized_range(cursor)
        if selected is None:
            return ""
        start, end = selected
        rows = []
        for row in range(start.line_index, end.line_index + 1):
            line = buffer.line(row)
            if line is None:
                break
            first = start.grapheme_index if row == start.line_index else 0
            last = end.grapheme_index if row == end.line_index else line.grapheme_count()
            rows.append(line.substring(first, last))
        return '\n'.join(rows)
