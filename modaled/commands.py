"""Command pattern implementation for mode-dependent editor actions.

The registry maps (mode, command type, character) to a command object. A
character of None registers a fallback for every character in that mode.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .editorcommand import CommandType, Direction

if TYPE_CHECKING:
    from .editorcommand import EditorCommand
    from .view import View


class ViewCommand(ABC):
    """Base class for view commands."""

    @abstractmethod
    def execute(self, view: 'View', command: 'EditorCommand') -> bool:
        """Execute the command.

        Args:
            view: View instance
            command: The decoded command that triggered this one

        Returns:
            True if the editor should quit
        """
        pass


class MovementCommand(ViewCommand):
    """Moves the cursor one cell; in Visual mode this extends the selection."""

    def __init__(self, direction: Direction):
        self.direction = direction

    def execute(self, view: 'View', command: 'EditorCommand') -> bool:
        view.move_text_location(self.direction)
        return False


class EditCommand(ViewCommand):
    """Base class for commands that change the document."""

    def execute(self, view: 'View', command: 'EditorCommand') -> bool:
        self._edit(view, command)
        view.needs_redraw = True
        return False

    @abstractmethod
    def _edit(self, view: 'View', command: 'EditorCommand'):
        """Perform the edit."""
        pass


class InsertCharCommand(EditCommand):
    def _edit(self, view, command):
        view.insert_char(command.char)


class ReplaceCharCommand(EditCommand):
    def _edit(self, view, command):
        view.replace_char(command.char)


class InsertTabCommand(EditCommand):
    def _edit(self, view, command):
        view.insert_tab()


class InsertLineCommand(EditCommand):
    def _edit(self, view, command):
        view.insert_line()


class DeleteCommand(EditCommand):
    def _edit(self, view, command):
        view.delete()


class BackspaceCommand(EditCommand):
    def _edit(self, view, command):
        view.backspace()


class OpenLineBelowCommand(EditCommand):
    def _edit(self, view, command):
        view.open_line_below()


class OpenLineAboveCommand(EditCommand):
    def _edit(self, view, command):
        view.open_line_above()


class IndentLineCommand(EditCommand):
    def _edit(self, view, command):
        view.single_indent()


class IndentSelectionCommand(EditCommand):
    def _edit(self, view, command):
        view.multi_indent()


class PasteCommand(EditCommand):
    def _edit(self, view, command):
        view.paste()


class CutCommand(EditCommand):
    def _edit(self, view, command):
        view.cut()


class ModeCommand(ViewCommand):
    """Switches to a fixed mode without touching the document."""

    def __init__(self, mode):
        self.mode = mode

    def execute(self, view: 'View', command: 'EditorCommand') -> bool:
        view.enter_mode(self.mode)
        return False


class StartSelectionCommand(ViewCommand):
    """Anchors a selection at the cursor and enters Visual mode."""

    def execute(self, view, command):
        view.start_selection()
        return False


class EscapeCommand(ViewCommand):
    """Returns to Normal mode, dropping any selection."""

    def execute(self, view, command):
        view.exit_to_normal()
        return False


class SystemCommand(ViewCommand):
    """Base class for system commands like save, quit, resize."""

    def execute(self, view: 'View', command: 'EditorCommand') -> bool:
        self._execute_system(view, command)
        return False

    @abstractmethod
    def _execute_system(self, view: 'View', command: 'EditorCommand'):
        """Perform the system action."""
        pass


class QuitCommand(ViewCommand):
    def execute(self, view, command):
        return True


class SaveCommand(SystemCommand):
    def _execute_system(self, view, command):
        view.save()


class CenterCommand(SystemCommand):
    def _execute_system(self, view, command):
        view.center_cursor()


class ResizeCommand(SystemCommand):
    def _execute_system(self, view, command):
        if command.size is not None:
            view.resize(command.size)


class CopyCommand(SystemCommand):
    def _execute_system(self, view, command):
        view.copy_and_exit()


CommandKey = Tuple['Mode', CommandType, Optional[str]]


class CommandRegistry:
    """Registry for mapping (mode, command) pairs to view commands."""

    def __init__(self):
        self._commands: Dict[CommandKey, ViewCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        from .view import Mode

        movements = {
            CommandType.UP: Direction.UP,
            CommandType.DOWN: Direction.DOWN,
            CommandType.LEFT: Direction.LEFT,
            CommandType.RIGHT: Direction.RIGHT,
        }
        vi_keys = {'h': Direction.LEFT, 'j': Direction.DOWN, 'k': Direction.UP, 'l': Direction.RIGHT}

        # Resize is honored in every mode
        for mode in Mode:
            self.register((mode, CommandType.RESIZE, None), ResizeCommand())

        # Arrow keys move in every mode but Replace
        for mode in (Mode.NORMAL, Mode.INSERT, Mode.VISUAL):
            for command_type, direction in movements.items():
                self.register((mode, command_type, None), MovementCommand(direction))

        # Normal mode
        for char, direction in vi_keys.items():
            self.register((Mode.NORMAL, CommandType.CHAR, char), MovementCommand(direction))
        self.register((Mode.NORMAL, CommandType.CHAR, 'i'), ModeCommand(Mode.INSERT))
        self.register((Mode.NORMAL, CommandType.CHAR, 'r'), ModeCommand(Mode.REPLACE))
        self.register((Mode.NORMAL, CommandType.CHAR, 'v'), StartSelectionCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 'q'), QuitCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 'x'), DeleteCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 'X'), BackspaceCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 's'), SaveCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 'z'), CenterCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 'p'), PasteCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 'o'), OpenLineBelowCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, 'O'), OpenLineAboveCommand())
        self.register((Mode.NORMAL, CommandType.CHAR, '>'), IndentLineCommand())

        # Insert mode
        self.register((Mode.INSERT, CommandType.ESCAPE, None), EscapeCommand())
        self.register((Mode.INSERT, CommandType.CHAR, None), InsertCharCommand())
        self.register((Mode.INSERT, CommandType.DELETE, None), DeleteCommand())
        self.register((Mode.INSERT, CommandType.BACKSPACE, None), BackspaceCommand())
        self.register((Mode.INSERT, CommandType.TAB, None), InsertTabCommand())
        self.register((Mode.INSERT, CommandType.ENTER, None), InsertLineCommand())

        # Replace mode
        self.register((Mode.REPLACE, CommandType.ESCAPE, None), EscapeCommand())
        self.register((Mode.REPLACE, CommandType.CHAR, None), ReplaceCharCommand())

        # Visual mode
        self.register((Mode.VISUAL, CommandType.ESCAPE, None), EscapeCommand())
        for char, direction in vi_keys.items():
            self.register((Mode.VISUAL, CommandType.CHAR, char), MovementCommand(direction))
        self.register((Mode.VISUAL, CommandType.CHAR, 'y'), CopyCommand())
        self.register((Mode.VISUAL, CommandType.CHAR, 'd'), CutCommand())
        self.register((Mode.VISUAL, CommandType.CHAR, 'p'), PasteCommand())
        self.register((Mode.VISUAL, CommandType.CHAR, '>'), IndentSelectionCommand())

    def register(self, key: CommandKey, command: ViewCommand):
        """Register a command for a (mode, command type, char) key."""
        self._commands[key] = command

    def get_command(self, key: CommandKey) -> Optional[ViewCommand]:
        return self._commands.get(key)

    def lookup(self, mode, command: 'EditorCommand') -> Optional[ViewCommand]:
        """Find the command bound to a decoded command in the given mode.

        Characters are looked up exactly first, then against the mode's
        any-character fallback.
        """
        if command.command_type == CommandType.CHAR:
            exact = self._commands.get((mode, CommandType.CHAR, command.char))
            if exact is not None:
                return exact
        return self._commands.get((mode, command.command_type, None))

    def bindings(self, mode) -> list[CommandKey]:
        """All keys registered for a mode."""
        return [key for key in self._commands if key[0] == mode]
