"""Document storage and structural edits.

Every mutation of the document goes through Buffer so that dirty tracking
lives in one place.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from .constants import EditorConstants
from .line import Line

logger = logging.getLogger(__name__)


@dataclass(order=True)
class Location:
    """A (line_index, grapheme_index) address into a Buffer.

    Field order makes comparisons lexicographic by line, then grapheme.
    """
    line_index: int = 0
    grapheme_index: int = 0

    def copy(self) -> "Location":
        return Location(self.line_index, self.grapheme_index)


class FileError(Exception):
    """Raised when a buffer cannot be loaded from or saved to disk."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason

    @property
    def is_missing(self) -> bool:
        return isinstance(self.__cause__, FileNotFoundError)


def _describe(error: Exception) -> str:
    if isinstance(error, PermissionError):
        return "Permission denied"
    if isinstance(error, FileNotFoundError):
        return "No such file"
    if isinstance(error, IsADirectoryError):
        return "Is a directory"
    if isinstance(error, UnicodeDecodeError):
        return "Not valid UTF-8"
    return error.strerror if isinstance(error, OSError) and error.strerror else str(error)


class Buffer:
    """An ordered list of Lines plus the path they are saved to."""

    def __init__(self, lines: Optional[list[Line]] = None,
                 source_path: str = EditorConstants.DEFAULT_BUFFER_NAME):
        self.lines: list[Line] = list(lines or [])
        self.source_path = source_path
        self.dirty = False

    @classmethod
    def from_text(cls, text: str, source_path: str = EditorConstants.DEFAULT_BUFFER_NAME) -> "Buffer":
        """Build a buffer from text, one Line per newline-delimited record."""
        records = text.split(EditorConstants.LINE_SEPARATOR)
        if records and records[-1] == "":
            # The terminator of the last line does not start a new one
            records.pop()
        return cls([Line.from_text(r) for r in records], source_path=source_path)

    @classmethod
    def load(cls, path: str) -> "Buffer":
        """Read a file into a new buffer.

        Raises:
            FileError: if the file is missing, unreadable or not UTF-8.
        """
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileError(path, _describe(e)) from e
        return cls.from_text(content, source_path=path)

    def to_text(self) -> str:
        return ''.join(str(line) + EditorConstants.LINE_SEPARATOR for line in self.lines)

    def save(self) -> None:
        """Write every line plus a trailing newline to source_path atomically.

        On failure the dirty flag is left untouched.

        Raises:
            FileError: if the file cannot be written.
        """
        path = self.source_path
        dir_name = os.path.dirname(path) or '.'
        temp_filename = None
        try:
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='',
                                             dir=dir_name,
                                             prefix=EditorConstants.ATOMIC_SAVE_PREFIX,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(self.to_text())
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, path)
        except OSError as e:
            if temp_filename is not None and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError as cleanup_error:
                    logger.warning(f"Could not remove temporary file {temp_filename}: {cleanup_error}")
            raise FileError(path, _describe(e)) from e
        self.dirty = False

    def is_empty(self) -> bool:
        return not self.lines

    def height(self) -> int:
        return len(self.lines)

    def line(self, index: int) -> Optional[Line]:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def line_length(self, index: int) -> int:
        """Grapheme count of a line, 0 for addresses past the end."""
        line = self.line(index)
        return line.grapheme_count() if line is not None else 0

    def insert_char(self, c: str, at: Location) -> None:
        if at.line_index > len(self.lines) or at.line_index < 0:
            return
        if at.line_index == len(self.lines):
            self.lines.append(Line.from_text(c))
        else:
            line = self.lines[at.line_index]
            before = str(line)
            line.insert_char(c, at.grapheme_index)
            if str(line) == before:
                return
        self.dirty = True

    def delete(self, at: Location) -> None:
        """Delete the grapheme at at, or join the next line when at the end."""
        line = self.line(at.line_index)
        if line is None or at.grapheme_index < 0:
            return
        if at.grapheme_index >= line.grapheme_count():
            if at.line_index + 1 < len(self.lines):
                following = self.lines.pop(at.line_index + 1)
                line.append(following)
                self.dirty = True
        else:
            line.delete(at.grapheme_index)
            self.dirty = True

    def insert_line(self, at: Location) -> None:
        """Split the addressed line at the cursor (the Enter key)."""
        if at.line_index > len(self.lines) or at.line_index < 0:
            return
        if at.line_index == len(self.lines):
            self.lines.append(Line())
        else:
            tail = self.lines[at.line_index].split(at.grapheme_index)
            self.lines.insert(at.line_index + 1, tail)
        self.dirty = True

    def delete_line(self, row: int, start: int, end: int) -> None:
        """Delete graphemes [start, end) within a single row."""
        line = self.line(row)
        if line is None:
            return
        before = line.grapheme_count()
        line.delete_range(start, end)
        if line.grapheme_count() != before:
            self.dirty = True

    def delete_range(self, start: Location, end: Location) -> None:
        """Delete the text between two ordered Locations, end exclusive."""
        if start.line_index == end.line_index:
            self.delete_line(start.line_index, start.grapheme_index, end.grapheme_index)
            return
        first = self.line(start.line_index)
        if first is None:
            return
        last_index = min(end.line_index, len(self.lines))
        last = self.line(last_index)
        tail = Line()
        if last is not None:
            self.delete_line(last_index, 0, end.grapheme_index)
            tail = Line.from_text(str(last))
        # Remove every row after the first one up to and including the last
        del self.lines[start.line_index + 1:last_index + 1]
        self.delete_line(start.line_index, start.grapheme_index, first.grapheme_count())
        first.append(tail)
        self.dirty = True

    def insert_text(self, text: str, at: Location) -> Location:
        """Insert possibly multi-line text at a Location.

        Returns the Location just past the inserted text.
        """
        if at.line_index > len(self.lines) or at.line_index < 0 or not text:
            return at.copy()
        if at.line_index == len(self.lines):
            self.lines.append(Line())
        line = self.lines[at.line_index]
        column = min(max(0, at.grapheme_index), line.grapheme_count())
        tail = line.split(column)
        records = text.split(EditorConstants.LINE_SEPARATOR)
        line.append(Line.from_text(records[0]))
        row = at.line_index
        for record in records[1:]:
            row += 1
            self.lines.insert(row, Line.from_text(record))
        end = Location(row, self.lines[row].grapheme_count())
        self.lines[row].append(tail)
        self.dirty = True
        return end
