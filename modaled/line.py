"""Grapheme-aware text lines.

A Line stores its text as an ordered list of grapheme clusters, each carrying
the number of terminal columns it occupies. All cursor arithmetic in the
editor is done in grapheme indices; this module is the only place where those
indices are translated into display columns.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterable, Optional

import grapheme
import wcwidth

from .constants import EditorConstants


@dataclass(frozen=True)
class TextFragment:
    """One grapheme cluster and how it is drawn."""
    grapheme: str
    width: int  # Always >= 1
    replacement: Optional[str] = None  # Glyph drawn instead of the grapheme

    @property
    def rendered(self) -> str:
        return self.replacement if self.replacement is not None else self.grapheme


def _measure(g: str) -> tuple[int, Optional[str]]:
    """Return (display width, replacement glyph) for a grapheme cluster.

    Clusters that would occupy zero columns are given width 1 and a visible
    replacement so that the cursor never sits on an invisible cell.
    """
    if g == '\t':
        return 1, ' '
    first = ord(g[0])
    if len(g) == 1 and (first < 0x20 or 0x7F <= first <= 0x9F):
        return 1, EditorConstants.CONTROL_REPLACEMENT

    if len(g) > 1:
        # Emoji presentation, ZWJ sequences, skin tones and flags
        for ch in g:
            cp = ord(ch)
            if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
                return 2, None

    width = wcwidth.wcswidth(g)
    if width < 0:
        width = wcwidth.wcwidth(g[0])
    if width <= 0:
        if unicodedata.category(g[0]) == "Cc":
            return 1, EditorConstants.CONTROL_REPLACEMENT
        return 1, EditorConstants.ZERO_WIDTH_REPLACEMENT
    return width, None


def _segment(text: str) -> list[TextFragment]:
    fragments = []
    for g in grapheme.graphemes(text):
        width, replacement = _measure(g)
        fragments.append(TextFragment(g, width, replacement))
    return fragments


class Line:
    """A single line of text stored as grapheme clusters."""

    def __init__(self, fragments: Optional[Iterable[TextFragment]] = None):
        self._fragments: list[TextFragment] = list(fragments or [])

    @classmethod
    def from_text(cls, text: str) -> "Line":
        """Decompose a string into grapheme clusters."""
        return cls(_segment(text))

    def _set_text(self, text: str) -> None:
        # Re-segment so clusters that join across an edit seam stay one grapheme
        self._fragments = _segment(text)

    def __str__(self) -> str:
        return ''.join(f.grapheme for f in self._fragments)

    def __repr__(self) -> str:
        return f"Line({str(self)!r})"

    def __len__(self) -> int:
        return len(self._fragments)

    def __eq__(self, other) -> bool:
        if isinstance(other, Line):
            return str(self) == str(other)
        return NotImplemented

    @property
    def fragments(self) -> tuple[TextFragment, ...]:
        return tuple(self._fragments)

    def grapheme_count(self) -> int:
        return len(self._fragments)

    def width(self) -> int:
        """Total display width of the line."""
        return sum(f.width for f in self._fragments)

    def width_until(self, grapheme_index: int) -> int:
        """Display width of all graphemes strictly before grapheme_index."""
        return sum(f.width for f in self._fragments[:max(0, grapheme_index)])

    def substring(self, start: int, end: int) -> str:
        """Original text of graphemes [start, end)."""
        start = max(0, start)
        end = min(end, len(self._fragments))
        if start >= end:
            return ""
        return ''.join(f.grapheme for f in self._fragments[start:end])

    def insert_char(self, c: str, at: int) -> None:
        """Insert c before grapheme at; at == grapheme_count() appends.

        An index past the end is ignored. A combining character merges into
        the preceding cluster, so the grapheme count may stay unchanged.
        """
        count = len(self._fragments)
        if at < 0 or at > count:
            return
        self._set_text(self.substring(0, at) + c + self.substring(at, count))

    def delete(self, at: int) -> None:
        """Remove the grapheme at index at."""
        count = len(self._fragments)
        if at < 0 or at >= count:
            return
        self._set_text(self.substring(0, at) + self.substring(at + 1, count))

    def delete_range(self, start: int, end: int) -> None:
        """Remove graphemes [start, end)."""
        count = len(self._fragments)
        start = max(0, start)
        end = min(end, count)
        if start >= end:
            return
        self._set_text(self.substring(0, start) + self.substring(end, count))

    def split(self, at: int) -> "Line":
        """Truncate to [0, at) and return a new Line holding [at, end)."""
        count = len(self._fragments)
        at = min(max(0, at), count)
        tail = Line.from_text(self.substring(at, count))
        self._set_text(self.substring(0, at))
        return tail

    def append(self, other: "Line") -> None:
        self._set_text(str(self) + str(other))

    def split_cell_gap(self, column: int) -> int:
        """Columns from column to the end of the cluster it falls inside.

        Zero when column lies on a cluster boundary or past the line.
        """
        position = 0
        for fragment in self._fragments:
            if position >= column:
                break
            fragment_end = position + fragment.width
            if column < fragment_end:
                return fragment_end - column
            position = fragment_end
        return 0

    def get_visible_graphemes(self, column_range: range) -> str:
        """Return the rendered text of clusters lying fully inside column_range.

        The range is end-exclusive. A wide cluster straddling either boundary
        is left out entirely.
        """
        start, end = column_range.start, column_range.stop
        if start >= end:
            return ""
        out = []
        position = 0
        for fragment in self._fragments:
            if position >= end:
                break
            fragment_end = position + fragment.width
            if position >= start and fragment_end <= end:
                out.append(fragment.rendered)
            position = fragment_end
        return ''.join(out)
