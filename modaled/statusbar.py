"""Status line shown below the document."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DocumentStatus:
    total_lines: int = 0
    current_line_index: int = 0
    is_modified: bool = False
    filename: str = ""
    mode: str = ""


class StatusBar:
    """Draws mode, file name and line position on the bottom row."""

    def __init__(self, terminal, width: int = 0, position_y: int = 0):
        self.terminal = terminal
        self.current_status = DocumentStatus()
        self.message: Optional[str] = None
        self.needs_redraw = True
        self.width = width
        self.position_y = position_y

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.position_y = max(0, height - 1)
        self.needs_redraw = True

    def update_status(self, status: DocumentStatus, message: Optional[str] = None) -> None:
        if status != self.current_status or message != self.message:
            self.current_status = status
            self.message = message
            self.needs_redraw = True

    def format(self) -> str:
        """Compose the status text, padded to the bar width."""
        if self.message:
            return f" {self.message}"[:self.width].ljust(self.width)
        status = self.current_status
        third = self.width // 3
        line_info = f"{status.current_line_index + 1}/{status.total_lines + 1}"
        file_info = status.filename + ("*" if status.is_modified else "")
        text = f"{status.mode:<{third}}{file_info:^{third}}{line_info:>{third}}"
        return text[:self.width]

    def render(self) -> None:
        if not self.needs_redraw or self.width == 0:
            return
        self.terminal.print_segmented(self.position_y, self.format())
        self.needs_redraw = False
