"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import select
import sys
import termios
from typing import Optional

import blessed

from .editorcommand import Size

logger = logging.getLogger(__name__)


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Output is queued and written on flush() so that one render pass reaches
    the terminal as a single write.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None, stream=None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.stream = stream or sys.stdout
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._pending: list[str] = []

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        self._write(self.term.enter_fullscreen + self.term.clear)
        self.flush()
        self.is_fullscreen = True
        if self._curtsies_input is None:
            from curtsies import Input
            # Entering the Input context puts the tty in raw mode
            self._curtsies_input = Input(keynames='curtsies')
            self._curtsies_input.__enter__()

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            self._write(self.term.exit_fullscreen + self.term.normal_cursor)
            self.flush()
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)
            except (OSError, termios.error) as e:
                logger.warning(f"Could not restore terminal mode: {e}")
            finally:
                self._curtsies_input = None

    def _write(self, text: str) -> None:
        self._pending.append(text)

    def query_size(self) -> Size:
        """Terminal size in cells, including the status row."""
        return Size(width=self.term.width, height=self.term.height)

    def move_caret_to(self, row: int, col: int) -> None:
        self._write(self.term.move(row, col))

    def hide_caret(self) -> None:
        self._write(self.term.hide_cursor)

    def show_caret(self) -> None:
        self._write(self.term.normal_cursor)

    def clear_line(self) -> None:
        self._write(self.term.clear_eol)

    def print_segmented(self, row: int, left: str = "", middle: str = "", right: str = "",
                        highlight: bool = False) -> None:
        """Replace a row with up to three segments, the middle one optionally reversed."""
        self.move_caret_to(row, 0)
        self.clear_line()
        out = [left or ""]
        if middle:
            if highlight:
                out.append(self.term.reverse + middle + self.term.normal)
            else:
                out.append(middle)
        out.append(right or "")
        self._write(''.join(out))

    def flush(self) -> None:
        if self._pending:
            self.stream.write(''.join(self._pending))
            self._pending = []
        self.stream.flush()

    def get_key(self, timeout=None):
        """Get a single keypress from the user as a curtsies key name.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The key name, or None if no key arrived in time.
        """
        if self._curtsies_input is None:
            return None
        if timeout is None:
            return str(next(self._curtsies_input))
        r, _, _ = select.select([sys.stdin], [], [], float(timeout))
        if not r:
            return None
        return str(next(self._curtsies_input))
