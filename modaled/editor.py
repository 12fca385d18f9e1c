"""Main editor controller: the read-dispatch-render loop."""

import logging
import os
import select
import signal
from typing import Optional, Union

from .constants import EditorConstants
from .editorcommand import Size
from .keyboard import KeyboardHandler, KeyEvent, ResizeEvent
from .statusbar import StatusBar
from .terminal import TerminalInterface
from .view import View

logger = logging.getLogger(__name__)


class Editor:
    """Main application controller.

    Owns the terminal, the View and the status bar. Each turn of the loop
    waits for one input event, lets the View handle it, then redraws.
    """

    def __init__(self, terminal: Optional[TerminalInterface] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.view = View(self.terminal, size=self._view_size())
        self.statusbar = StatusBar(self.terminal)
        terminal_size = self.terminal.query_size()
        self.statusbar.resize(terminal_size.width, terminal_size.height)
        self.running = False
        # Create pipe for resize signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()

    def _view_size(self) -> Size:
        size = self.terminal.query_size()
        return Size(width=size.width, height=max(0, size.height - EditorConstants.STATUS_ROWS))

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def load_file(self, filename: str) -> None:
        """Load a file into the editor.

        A missing file starts an empty document that will be saved under
        that name; any other failure keeps the current buffer.
        """
        error = self.view.load(filename)
        if error is None:
            return
        if error.is_missing:
            self.view.buffer.source_path = filename
        else:
            self.view.status_message = f"Error: {error.reason} loading {filename}"

    def handle_event(self, event: Union[KeyEvent, ResizeEvent]) -> None:
        """Handle one input event, stopping the loop on quit."""
        if isinstance(event, KeyEvent):
            # Status messages last until the next keypress
            self.view.status_message = None
        if isinstance(event, ResizeEvent):
            self.statusbar.resize(event.width, event.height + EditorConstants.STATUS_ROWS)
        if self.view.handle_event(event):
            self.running = False


    def _resize_event(self) -> ResizeEvent:
        size = self._view_size()
        return ResizeEvent(width=size.width, height=size.height)

    def refresh_screen(self) -> None:
        """Draw the current editor state to terminal."""
        self.terminal.hide_caret()
        self.view.render()
        self.statusbar.update_status(self.view.get_status(), self.view.status_message)
        self.statusbar.render()
        caret = self.view.caret_position()
        self.terminal.move_caret_to(caret.row, caret.col)
        self.terminal.show_caret()
        self.terminal.flush()

    def run(self) -> None:
        """Run the main editor loop."""
        self.terminal.setup()
        self.running = True
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

        try:
            self.handle_event(self._resize_event())
            while self.running:
                self.refresh_screen()

                # Wait for input on stdin or resize pipe
                ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                if self._resize_pipe_r in ready:
                    os.read(self._resize_pipe_r, 1024)
                    self.handle_event(self._resize_event())
                elif 0 in ready:
                    key_event = self.keyboard.get_key_event(timeout=0)
                    if key_event:
                        self.handle_event(key_event)
        except KeyboardInterrupt:
            logger.debug("Interrupted")
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()
