"""modaled CLI entry point.

Allows running via `python -m modaled` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys

from .version import get_version_string

LOG_ENV_VAR = "MODALED_LOG"


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def configure_logging() -> None:
    """Send log records to the file named by $MODALED_LOG, if set.

    Nothing is logged to the terminal, which belongs to the editor.
    """
    log_file = os.environ.get(LOG_ENV_VAR)
    if not log_file:
        logging.getLogger("modaled").addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_keyboard_test() -> None:
    """Print the decoded command for every key pressed. Quit with ESC."""
    from .editorcommand import CommandType, EditorCommand
    from .keyboard import KeyboardHandler, KeyEvent
    from .terminal import TerminalInterface

    print("Keyboard test mode - press keys to see decoded commands.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    kb = KeyboardHandler(term)
    try:
        while True:
            ev: KeyEvent | None = kb.get_key_event(timeout=None)
            if not ev:
                continue
            command = EditorCommand.from_event(ev)
            if command.command_type == CommandType.ESCAPE:
                break
            parts = [
                f"type={ev.key_type.value}",
                f"value={ev.value}",
                f"raw='{_escape_bytes(ev.raw)}'",
                f"command={command.command_type.value}",
            ]
            if command.char is not None:
                parts.append(f"char={command.char!r}")
            print(' '.join(parts), end='\r\n', flush=True)
    finally:
        term.cleanup()


def main() -> None:
    # Very small arg parsing to support keyboard test mode, version, and optional filename
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    configure_logging()
    if args and args[0] in ('--keytest', '--keyboard-test'):
        run_keyboard_test()
        return

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    editor = Editor()
    if args:
        editor.load_file(args[0])
    editor.run()
    print("Goodbye")


if __name__ == "__main__":  # pragma: no cover
    main()
