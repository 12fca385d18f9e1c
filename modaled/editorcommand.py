"""Abstract editor commands decoded from input events.

Decoding does not depend on the current mode: the same key always becomes
the same command, and the View decides what the command means.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .keyboard import KeyEvent, KeyType, ResizeEvent


class CommandType(Enum):
    CHAR = "char"
    RESIZE = "resize"
    ESCAPE = "escape"
    DELETE = "delete"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    TAB = "tab"
    ENTER = "enter"
    OTHER = "other"


@dataclass(frozen=True)
class Size:
    width: int = 0
    height: int = 0


_SPECIAL_COMMANDS = {
    'escape': CommandType.ESCAPE,
    'delete': CommandType.DELETE,
    'backspace': CommandType.BACKSPACE,
    'up': CommandType.UP,
    'down': CommandType.DOWN,
    'left': CommandType.LEFT,
    'right': CommandType.RIGHT,
    'enter': CommandType.ENTER,
}


@dataclass(frozen=True)
class EditorCommand:
    """A mode-independent command: a typed character, a key or a resize."""
    command_type: CommandType
    char: Optional[str] = None
    size: Optional[Size] = None

    @classmethod
    def char_key(cls, c: str) -> "EditorCommand":
        return cls(CommandType.CHAR, char=c)

    @classmethod
    def resize(cls, width: int, height: int) -> "EditorCommand":
        return cls(CommandType.RESIZE, size=Size(width, height))

    @classmethod
    def from_event(cls, event: Union[KeyEvent, ResizeEvent]) -> "EditorCommand":
        """Decode a raw input event into an abstract command.

        Anything that is not a plain character, one of the editing keys or
        a resize becomes OTHER, which every mode ignores.
        """
        if isinstance(event, ResizeEvent):
            return cls.resize(event.width, event.height)
        if not isinstance(event, KeyEvent):
            return cls(CommandType.OTHER)
        if event.key_type == KeyType.REGULAR:
            if event.value == '\t':
                return cls(CommandType.TAB)
            if event.value and ord(event.value[0]) >= 32:
                return cls.char_key(event.value)
            return cls(CommandType.OTHER)
        if event.key_type in (KeyType.SPECIAL, KeyType.SHIFT_SPECIAL):
            command_type = _SPECIAL_COMMANDS.get(event.value)
            if command_type is not None:
                return cls(command_type)
        return cls(CommandType.OTHER)


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
