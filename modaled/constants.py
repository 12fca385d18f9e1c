"""Constants and configuration for the modaled editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Editing
    INDENT_WIDTH = 2  # Spaces prepended by '>'
    TAB_WIDTH = 2  # Spaces inserted by Tab in insert mode

    # Buffer defaults
    DEFAULT_BUFFER_NAME = "untitled.txt"  # Save target when no file was given
    LINE_SEPARATOR = "\n"

    # Rendering
    FILLER_GLYPH = "~"  # Rows past the end of the document
    CONTROL_REPLACEMENT = "▯"  # Rendered in place of control characters
    ZERO_WIDTH_REPLACEMENT = "·"  # Rendered in place of zero-width graphemes
    WELCOME_MESSAGE = "{name} version {version}"
    STATUS_ROWS = 1  # Rows reserved at the bottom for the status bar

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
