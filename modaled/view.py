"""The View: owner of cursor, viewport, selection and editing mode.

Commands decoded from input are dispatched through a CommandRegistry keyed by
the current mode. After every command the cursor is clamped back inside the
document and the viewport is scrolled so the cursor stays visible.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, TYPE_CHECKING

from .buffer import Buffer, FileError, Location
from .constants import EditorConstants
from .editorcommand import Direction, EditorCommand, Size
from .selection import Selection
from .statusbar import DocumentStatus
from .version import NAME, get_package_version

if TYPE_CHECKING:
    from .commands import CommandRegistry

logger = logging.getLogger(__name__)


class Mode(Enum):
    NORMAL = "Normal"
    INSERT = "Insert"
    VISUAL = "Visual"
    REPLACE = "Replace"


@dataclass
class Position:
    """A (row, col) position in display cells."""
    row: int = 0
    col: int = 0

    def saturating_sub(self, other: "Position") -> "Position":
        return Position(max(0, self.row - other.row), max(0, self.col - other.col))


class RenderRow(NamedTuple):
    """One screen row: left and right are plain, middle is highlighted."""
    row: int
    left: str
    middle: str = ""
    right: str = ""

    @property
    def text(self) -> str:
        return self.left + self.middle + self.right


class View:
    def __init__(self, terminal=None, size: Size = Size(), buffer: Optional[Buffer] = None,
                 registry: Optional["CommandRegistry"] = None):
        if registry is None:
            from .commands import CommandRegistry
            registry = CommandRegistry()
        self.terminal = terminal
        self.registry = registry
        self.buffer = buffer if buffer is not None else Buffer()
        self.cursor = Location()
        self.scroll_offset = Position()
        self.size = size
        self.selection = Selection()
        self.mode = Mode.NORMAL
        self.clipboard = ""
        self.status_message: Optional[str] = None
        self.needs_redraw = True

    # --- Dispatch ---

    def handle_command(self, command: EditorCommand) -> bool:
        """Run the command bound to (mode, command).

        Returns:
            True if the editor should quit.
        """
        handler = self.registry.lookup(self.mode, command)
        if handler is None:
            return False
        should_quit = handler.execute(self, command)
        self.snap_to_valid_line()
        self.snap_to_valid_grapheme()
        self.scroll_text_location_into_view()
        return should_quit

    def handle_event(self, event) -> bool:
        return self.handle_command(EditorCommand.from_event(event))

    def enter_mode(self, mode: Mode) -> None:
        if mode != self.mode:
            logger.debug(f"Mode {self.mode.value} -> {mode.value}")
        self.mode = mode
        self.needs_redraw = True

    def exit_to_normal(self) -> None:
        if self.mode == Mode.VISUAL:
            self.exit_selection()
        else:
            self.enter_mode(Mode.NORMAL)

    # --- Selection ---

    def start_selection(self) -> None:
        self.selection.start_selection(self.cursor)
        self.enter_mode(Mode.VISUAL)

    def exit_selection(self) -> None:
        self.selection.exit()
        self.enter_mode(Mode.NORMAL)

    def copy(self) -> None:
        if self.selection.active:
            self.clipboard = self.selection.extract_text(self.buffer, self.cursor)

    def copy_and_exit(self) -> None:
        self.copy()
        self.exit_selection()

    def cut(self) -> None:
        self.copy()
        self.delete_selection()

    def delete_selection(self) -> None:
        selected = self.selection.normalized_range(self.cursor)
        if selected is None:
            return
        start, end = selected
        self.buffer.delete_range(start, end)
        self.cursor = start
        self.exit_selection()

    def paste(self) -> None:
        """Insert the register at the cursor, replacing any selection."""
        if self.selection.active:
            self.delete_selection()
        if self.clipboard:
            self.buffer.insert_text(self.clipboard, self.cursor)
        self.exit_selection()

    # --- Editing ---

    def insert_char(self, c: str) -> None:
        row = self.cursor.line_index
        old_len = self.buffer.line_length(row)
        self.buffer.insert_char(c, self.cursor)
        added = self.buffer.line_length(row) - old_len
        for _ in range(max(0, added)):
            self.move_right()
        self.needs_redraw = True

    def insert_tab(self) -> None:
        for _ in range(EditorConstants.TAB_WIDTH):
            self.insert_char(' ')

    def replace_char(self, c: str) -> None:
        """Forward-delete at the cursor, then insert c.

        At the end of a line the delete joins the next line first.
        """
        self.delete()
        self.insert_char(c)

    def insert_line(self) -> None:
        self.buffer.insert_line(self.cursor)
        self.move_down(1)
        self.move_to_start_of_line()
        self.needs_redraw = True

    def open_line_below(self) -> None:
        self.move_to_end_of_line()
        self.insert_line()
        self.enter_mode(Mode.INSERT)

    def open_line_above(self) -> None:
        self.move_to_start_of_line()
        self.buffer.insert_line(self.cursor)
        self.enter_mode(Mode.INSERT)

    def delete(self) -> None:
        self.buffer.delete(self.cursor)
        self.needs_redraw = True

    def backspace(self) -> None:
        # Start of document: nothing before the cursor
        if self.cursor.line_index == 0 and self.cursor.grapheme_index == 0:
            return
        if self.cursor.grapheme_index == 0:
            self.move_up(1)
            self.move_to_end_of_line()
        else:
            self.move_left()
        self.delete()

    def indent(self, row: int) -> None:
        """Prepend spaces to a row; the cursor keeps its row and column."""
        if row >= self.buffer.height():
            return
        saved = self.cursor.copy()
        self.cursor = Location(row, 0)
        for _ in range(EditorConstants.INDENT_WIDTH):
            self.buffer.insert_char(' ', self.cursor)
        self.cursor = saved
        self.needs_redraw = True

    def single_indent(self) -> None:
        self.indent(self.cursor.line_index)

    def multi_indent(self) -> None:
        selected = self.selection.normalized_range(self.cursor)
        if selected is not None:
            start, end = selected
            for row in range(start.line_index, end.line_index + 1):
                self.indent(row)
        self.exit_selection()

    # --- Files ---

    def load(self, path: str) -> Optional[FileError]:
        """Replace the buffer with a file's content; keep it on failure."""
        try:
            buffer = Buffer.load(path)
        except FileError as e:
            logger.warning(f"Could not load {path}: {e.reason}")
            self.needs_redraw = True
            return e
        self.buffer = buffer
        self.cursor = Location()
        self.scroll_offset = Position()
        self.selection.exit()
        self.mode = Mode.NORMAL
        self.needs_redraw = True
        return None

    def save(self) -> Optional[FileError]:
        try:
            self.buffer.save()
        except FileError as e:
            logger.warning(f"Could not save {e.path}: {e.reason}")
            self.status_message = f"Error: {e.reason} saving {e.path}"
            return e
        self.status_message = f"Saved to {self.buffer.source_path}"
        return None

    # --- Cursor movement ---

    def move_text_location(self, direction: Direction) -> None:
        if direction == Direction.UP:
            self.move_up(1)
        elif direction == Direction.DOWN:
            self.move_down(1)
        elif direction == Direction.LEFT:
            self.move_left()
        elif direction == Direction.RIGHT:
            self.move_right()
        self.scroll_text_location_into_view()
        if self.selection.active:
            self.needs_redraw = True

    def move_up(self, step: int) -> None:
        self.cursor.line_index = max(0, self.cursor.line_index - step)
        self.snap_to_valid_grapheme()

    def move_down(self, step: int) -> None:
        self.cursor.line_index = self.cursor.line_index + step
        self.snap_to_valid_line()
        self.snap_to_valid_grapheme()

    def move_right(self) -> None:
        if self.cursor.grapheme_index < self.buffer.line_length(self.cursor.line_index):
            self.cursor.grapheme_index += 1

    def move_left(self) -> None:
        if self.cursor.grapheme_index > 0:
            self.cursor.grapheme_index -= 1

    def move_to_start_of_line(self) -> None:
        self.cursor.grapheme_index = 0

    def move_to_end_of_line(self) -> None:
        self.cursor.grapheme_index = self.buffer.line_length(self.cursor.line_index)

    def snap_to_valid_grapheme(self) -> None:
        self.cursor.grapheme_index = min(max(0, self.cursor.grapheme_index),
                                         self.buffer.line_length(self.cursor.line_index))

    def snap_to_valid_line(self) -> None:
        self.cursor.line_index = min(max(0, self.cursor.line_index), self.buffer.height())

    # --- Viewport ---

    def resize(self, size: Size) -> None:
        self.size = size
        self.scroll_text_location_into_view()
        self.needs_redraw = True

    def text_location_to_position(self) -> Position:
        row = self.cursor.line_index
        line = self.buffer.line(row)
        col = line.width_until(self.cursor.grapheme_index) if line is not None else 0
        return Position(row, col)

    def caret_position(self) -> Position:
        """Cursor position on screen, relative to the scroll offset."""
        return self.text_location_to_position().saturating_sub(self.scroll_offset)

    def scroll_vertically(self, to: int) -> None:
        height = self.size.height
        if height == 0:
            return
        if to < self.scroll_offset.row:
            self.scroll_offset.row = to
            self.needs_redraw = True
        elif to >= self.scroll_offset.row + height:
            self.scroll_offset.row = max(0, to - height + 1)
            self.needs_redraw = True

    def scroll_horizontally(self, to: int) -> None:
        width = self.size.width
        if width == 0:
            return
        if to < self.scroll_offset.col:
            self.scroll_offset.col = to
            self.needs_redraw = True
        elif to >= self.scroll_offset.col + width:
            self.scroll_offset.col = max(0, to - width + 1)
            self.needs_redraw = True

    def scroll_text_location_into_view(self) -> None:
        position = self.text_location_to_position()
        self.scroll_vertically(position.row)
        self.scroll_horizontally(position.col)

    def center_cursor(self) -> None:
        row = self.cursor.line_index
        self.scroll_offset.row = max(0, row - self.size.height // 2)
        self.needs_redraw = True

    # --- Rendering ---

    def get_status(self) -> DocumentStatus:
        return DocumentStatus(
            total_lines=self.buffer.height(),
            current_line_index=self.cursor.line_index,
            is_modified=self.buffer.dirty,
            filename=self.buffer.source_path,
            mode=self.mode.value,
        )

    def _welcome_message(self) -> str:
        width = self.size.width
        message = EditorConstants.WELCOME_MESSAGE.format(name=NAME, version=get_package_version())
        padding = max(0, width - len(message)) // 2
        spaces = " " * max(0, padding - 1)
        return f"{EditorConstants.FILLER_GLYPH}{spaces}{message}"[:width]

    def render_plan(self) -> list[RenderRow]:
        """Compute what every visible row shows, without touching the terminal."""
        width, height = self.size.width, self.size.height
        if width == 0 or height == 0:
            return []
        filler = EditorConstants.FILLER_GLYPH
        if self.buffer.is_empty():
            return [
                RenderRow(row, self._welcome_message() if row == height // 2 else filler)
                for row in range(height)
            ]

        plan = []
        x0 = self.scroll_offset.col
        x1 = x0 + width
        for row in range(height):
            line_index = row + self.scroll_offset.row
            line = self.buffer.line(line_index)
            if line is None:
                plan.append(RenderRow(row, filler))
                continue
            # A wide cluster cut by the left edge leaves blank cells
            pad = " " * min(line.split_cell_gap(x0), width)
            span = self.selection.line_span(self.cursor, line_index, line.grapheme_count())
            if span is None:
                plan.append(RenderRow(row, pad + line.get_visible_graphemes(range(x0, x1))))
                continue
            sel_start = min(max(line.width_until(span[0]), x0), x1)
            sel_end = min(max(line.width_until(span[1]), x0), x1)
            plan.append(RenderRow(
                row,
                pad + line.get_visible_graphemes(range(x0, sel_start)),
                line.get_visible_graphemes(range(sel_start, sel_end)),
                line.get_visible_graphemes(range(sel_end, x1)),
            ))
        return plan

    def render(self) -> None:
        if not self.needs_redraw or self.terminal is None:
            return
        for render_row in self.render_plan():
            self.terminal.print_segmented(
                render_row.row, render_row.left, render_row.middle, render_row.right,
                highlight=bool(render_row.middle),
            )
        self.needs_redraw = False
