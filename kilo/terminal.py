"""Terminal interface using Blessed for display and raw byte input."""

import logging
import os
import select
import sys
import termios
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, NoReturn, Optional

import blessed

logger = logging.getLogger(__name__)


class TerminalSizeError(RuntimeError):
    """The terminal size could not be determined."""


class Color(Enum):
    """Foreground colors used by the editor."""
    DEFAULT = "default"
    RED = "red"
    BLUE = "blue"
    INV_YELLOW = "inv_yellow"


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Output helpers return strings rather than writing them, so a whole
    frame can be composed and sent with a single write.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 input_fd: Optional[int] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self._input_fd = input_fd
        self.is_fullscreen = False
        self.is_raw = False

    @property
    def input_fd(self) -> int:
        if self._input_fd is None:
            self._input_fd = sys.stdin.fileno()
        return self._input_fd

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        self.write(self.term.enter_fullscreen + self.term.hide_cursor + self.term.clear)
        self.flush()
        self.is_fullscreen = True

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            self.write(self.term.exit_fullscreen + self.term.normal_cursor)
            self.flush()
            self.is_fullscreen = False

    @contextmanager
    def raw_mode(self) -> Iterator["TerminalInterface"]:
        """Put the terminal in raw mode for the duration of the block.

        Blessed saves the current settings and restores them when the
        block exits, whether normally, by exception or by SystemExit.
        """
        with self.term.raw():
            self._disable_flow_control()
            self.is_raw = True
            logger.debug("Entered raw mode")
            try:
                yield self
            finally:
                self.is_raw = False
                logger.debug("Left raw mode")

    def _disable_flow_control(self):
        """Clear IXON/IXOFF so Ctrl-S and Ctrl-Q reach the editor."""
        try:
            settings = termios.tcgetattr(self.input_fd)
            settings[0] &= ~(termios.IXON | termios.IXOFF)
            termios.tcsetattr(self.input_fd, termios.TCSANOW, settings)
        except (termios.error, OSError, ValueError):
            # Not a tty (pipes, test runners): nothing to disable
            pass

    def read_byte(self, timeout: Optional[float] = None) -> Optional[int]:
        """Read one byte of input.

        Args:
            timeout: Seconds to wait (None blocks)

        Returns:
            The byte value, or None on timeout or end of input.
        """
        ready, _, _ = select.select([self.input_fd], [], [], timeout)
        if not ready:
            return None
        data = os.read(self.input_fd, 1)
        if not data:
            return None
        return data[0]

    def write(self, text: str):
        # Lone surrogates carry raw bytes from the keyboard or a file
        text = text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
        self.term.stream.write(text)

    def flush(self):
        self.term.stream.flush()

    def get_window_size(self) -> tuple[int, int]:
        """Return the terminal size as (rows, columns)."""
        if not self.term.is_a_tty:
            raise TerminalSizeError("Unable to get window size: output is not a terminal")
        rows, cols = self.term.height, self.term.width
        if rows <= 0 or cols <= 0:
            raise TerminalSizeError(f"Unable to get window size: got {rows}x{cols}")
        return rows, cols

    # Escape vocabulary

    def clear_screen(self) -> str:
        return self.term.clear

    def cursor_topleft(self) -> str:
        return self.term.home

    def hide_cursor(self) -> str:
        return self.term.hide_cursor

    def show_cursor(self) -> str:
        return self.term.normal_cursor

    def erase_right_of_cursor(self) -> str:
        return self.term.clear_eol

    def move_cursor(self, y: int, x: int) -> str:
        """Move to a 0-based screen position."""
        return self.term.move_yx(y, x)

    def bold(self, text: str) -> str:
        return self.term.bold(text)

    def underlined(self, text: str) -> str:
        return self.term.underline(text)

    def blinking(self, text: str) -> str:
        return self.term.blink(text)

    def inverted(self, text: str) -> str:
        return self.term.reverse(text)

    def color(self, color: Color) -> str:
        """Return the sequence that switches the foreground to color.

        Attributes are reset first so reverse video from a previous
        color never leaks into the next one.
        """
        if color == Color.DEFAULT:
            return self.term.normal
        if color == Color.RED:
            return self.term.normal + self.term.red
        if color == Color.BLUE:
            return self.term.normal + self.term.blue
        if color == Color.INV_YELLOW:
            return self.term.normal + self.term.yellow + self.term.reverse
        raise ValueError(f"Unknown color: {color!r}")

    def die(self, message: str, status: int = 1) -> NoReturn:
        """Clear the screen, report message on stderr and exit."""
        self.write(self.clear_screen() + self.cursor_topleft())
        self.flush()
        logger.error("Fatal: %s", message)
        print(message, file=sys.stderr)
        sys.exit(status)
