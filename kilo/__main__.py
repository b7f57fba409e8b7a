"""Kilo CLI entry point.

Allows running via `python -m kilo` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .constants import EditorConstants
from .version import get_version_string

USAGE = "usage: kilo [--log-file PATH] [--version | --keytest | FILENAME]"


def _escape_text(s: str) -> str:
    """Return a printable representation of a decoded key."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Echo decoded key events in raw mode until 'q' is pressed."""
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, KeyType

    print("Keyboard test mode - press keys to see decoded events.")
    print("Quit with q.")

    term = TerminalInterface()
    kb = KeyboardHandler(term)

    with term.raw_mode():
        while True:
            ev = kb.get_key_event()
            if ev.key_type == KeyType.NOTHING:
                continue
            if ev.key_type == KeyType.CHARACTER and ev.value == 'q':
                break
            parts = [f"type={ev.key_type.value}"]
            if ev.value:
                parts.append(f"value='{_escape_text(ev.value)}'")
            parts.append(f"raw={ev.raw!r}")
            if ev.is_ctrl:
                parts.append("flags=ctrl")
            # Output post-processing is off: lines need an explicit \r
            term.write(' '.join(parts) + "\r\n")
            term.flush()


def _configure_logging(log_file: str) -> None:
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


def main(argv: Optional[list[str]] = None) -> None:
    # Very small arg parsing: log file, version, keyboard test mode and optional filename
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in ('--help', '-h'):
        print(USAGE)
        return
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] == '--log-file':
        if len(args) < 2:
            print(USAGE, file=sys.stderr)
            sys.exit(2)
        _configure_logging(args[1])
        args = args[2:]
    if args and args[0] in ('--keytest', '--keyboard-test'):
        run_keyboard_test()
        return

    # Lazy import to avoid touching the terminal for --version
    from .editor import Editor
    from .terminal import TerminalInterface, TerminalSizeError

    terminal = TerminalInterface()
    try:
        editor = Editor(terminal)
    except TerminalSizeError as e:
        terminal.die(str(e))
    if args:
        try:
            editor.open_file(args[0])
        except OSError as e:
            terminal.die(f"{args[0]}: {e.strerror or e}")
    editor.set_status_message(EditorConstants.HELP_MESSAGE)
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
