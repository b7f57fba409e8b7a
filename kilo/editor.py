"""Main editor controller."""

import errno
import logging
import os
import tempfile
import time
from typing import Callable, Optional

from .buffer import LineBuffer
from .commands import CommandRegistry, Movement
from .constants import EditorConstants
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from . import search
from .search import Direction, SearchContext
from .terminal import TerminalInterface, TerminalSizeError
from .view import colorize, fit, get_highlight_groups, welcome_string

logger = logging.getLogger(__name__)


class Editor:
    """Owns the cursor, viewport and session state and drives the screen.

    Cursor invariant, restored after every key: ``0 <= cy <= row_count()``
    and ``cx`` is a render column in ``[0, visual_column_count(cy)]`` that
    does not fall inside a tab. ``cy == row_count()`` is the empty line
    past the end of the document.
    """

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 keyboard: Optional[KeyboardHandler] = None):
        """Initialize the editor components.

        Raises:
            TerminalSizeError: if the terminal size is unknown or too small
        """
        self.terminal = terminal or TerminalInterface()
        self.keyboard = keyboard or KeyboardHandler(self.terminal)
        rows, cols = self.terminal.get_window_size()
        self.screen_rows = rows - EditorConstants.RESERVED_SCREEN_ROWS
        self.screen_cols = cols
        if self.screen_rows < 1:
            raise TerminalSizeError(f"Terminal too small: {rows} rows")
        self.command_registry = CommandRegistry()
        # Cursor: cx is a render column
        self.cx = 0
        self.cy = 0
        self.row_offset = 0
        self.col_offset = 0
        # File handling
        self.buffer = LineBuffer()
        self.filename: Optional[str] = None
        self.dirty = False
        self.status_message = ""
        self.status_message_time = 0.0
        self.quitting_count = 0
        self.search_context = SearchContext()
        self.running = True

    def set_status_message(self, message: str):
        self.status_message = message
        self.status_message_time = time.time()

    # Main loop

    def run(self):
        """Run the main editor loop."""
        self.terminal.setup()
        self.running = True
        try:
            with self.terminal.raw_mode():
                while self.running:
                    self.process_keypress()
                self.terminal.write(self.terminal.clear_screen() + self.terminal.cursor_topleft())
                self.terminal.flush()
        finally:
            self.terminal.cleanup()

    def process_keypress(self) -> bool:
        """Render, read one key and handle it.

        Returns:
            False once the editor should quit
        """
        self.refresh_screen()
        self._handle_key_event(self.keyboard.get_key_event())
        return self.running

    def _handle_key_event(self, key_event: KeyEvent):
        """Dispatch a key event to its command.

        Keys without a command (and NOTHING) leave every piece of state
        alone, including a pending quit confirmation.
        """
        command = self.command_registry.get_command(key_event)
        if command is None:
            return
        if command.execute(self, key_event):
            self.dirty = True
        if command.resets_quit_confirmation:
            self.quitting_count = 0

    def request_quit(self):
        """Quit, or warn first if there are unsaved changes."""
        if self.dirty and self.quitting_count < EditorConstants.QUIT_TIMES:
            self.quitting_count += 1
            self.set_status_message(EditorConstants.QUIT_WARNING_MESSAGE)
            return
        self.running = False

    # Cursor movement

    def _set_cursor(self, cx: int, cy: int):
        # Row first: the column bound depends on the row
        self.cy = max(0, min(cy, self.buffer.row_count()))
        self.cx = self.buffer.adjust_to_valid_render_column(self.cy, cx)

    def move_cursor(self, movement: Movement):
        cx, cy = self.cx, self.cy
        buffer = self.buffer
        if movement == Movement.UP:
            cy -= 1
        elif movement == Movement.DOWN:
            cy += 1
        elif movement == Movement.RIGHT:
            column = buffer.to_byte_column(cy, cx)
            if column < buffer.column_count(cy):
                cx = buffer.to_render_column(cy, column + 1)
        elif movement == Movement.LEFT:
            column = buffer.to_byte_column(cy, cx)
            if column > 0:
                cx = buffer.to_render_column(cy, column - 1)
        elif movement == Movement.HEAD:
            cx = 0
        elif movement == Movement.TAIL:
            cx = buffer.visual_column_count(cy)
        elif movement == Movement.PAGE_UP:
            cy = self.row_offset - self.screen_rows
        elif movement == Movement.PAGE_DOWN:
            cy = self.row_offset + 2 * self.screen_rows - 1
        self._set_cursor(cx, cy)

    # Editing

    def insert_char(self, ch: str) -> bool:
        column = self.buffer.to_byte_column(self.cy, self.cx)
        self.buffer.insert_character(self.cy, column, ch)
        self.cx = self.buffer.to_render_column(self.cy, column + 1)
        return True

    def insert_newline(self) -> bool:
        column = self.buffer.to_byte_column(self.cy, self.cx)
        self.buffer.insert_newline(self.cy, column)
        self.cy += 1
        self.cx = 0
        return True

    def delete_char(self) -> bool:
        """Delete the character left of the cursor, joining rows at column 0."""
        if self.cy == self.buffer.row_count():
            return False
        if self.cy == 0 and self.cx == 0:
            return False
        if self.cx > 0:
            column = self.buffer.to_byte_column(self.cy, self.cx)
            self.buffer.delete_character(self.cy, column - 1)
            self.cx = self.buffer.to_render_column(self.cy, column - 1)
            return True
        join_column = self.buffer.join_with_previous(self.cy)
        self.cy -= 1
        self.cx = self.buffer.to_render_column(self.cy, join_column)
        return True

    def delete_forward(self) -> bool:
        self.move_cursor(Movement.RIGHT)
        return self.delete_char()

    def delete_row(self) -> bool:
        """Delete the cursor's row unless it is the only one."""
        if self.cy >= self.buffer.row_count():
            return False
        if not self.buffer.delete_row(self.cy):
            return False
        self._set_cursor(self.cx, min(self.cy, self.buffer.row_count() - 1))
        return True

    # Prompt

    def prompt(self, message_format: str,
               callback: Optional[Callable[[str], object]] = None) -> Optional[str]:
        """Read a line of input in the message bar.

        The callback, if any, sees the input after every keystroke.

        Returns:
            The input on Enter, None on Escape
        """
        text = ""
        while True:
            if callback is not None:
                callback(text)
            self.set_status_message(message_format.format(text))
            self.refresh_screen()
            key_event = self.keyboard.get_key_event()
            if key_event.key_type == KeyType.ENTER:
                self.set_status_message("")
                return text
            if key_event.key_type == KeyType.ESCAPE:
                self.set_status_message("")
                return None
            if key_event.key_type == KeyType.BACKSPACE or key_event.is_ctrl_key('h'):
                text = text[:-1]
            elif (key_event.key_type == KeyType.CHARACTER and not key_event.is_ctrl
                  and ord(key_event.value) < 128):
                text += key_event.value

    # Search

    def search_and_jump(self, start_row: int, query: str) -> bool:
        """Move to the next match of query from start_row.

        On a miss nothing changes.
        """
        match = search.find(self.buffer, query, start_row, self.search_context.direction)
        if match is None:
            return False
        self.search_context.matching = query
        self.cy = match.row
        self.cx = self.buffer.to_render_column(match.row, match.column)
        return True

    def find(self):
        """Interactive search: jump as the query is typed."""
        self.search_context.direction = Direction.FORWARD
        saved = (self.cx, self.cy, self.row_offset, self.col_offset)
        start_row = self.cy
        query = self.prompt(EditorConstants.SEARCH_PROMPT,
                            callback=lambda text: self.search_and_jump(start_row, text))
        if query is None:
            self.search_context.matching = ""
            self.cx, self.cy, self.row_offset, self.col_offset = saved
        else:
            self.search_context.query = query

    def find_next(self):
        self.search_context.direction = Direction.FORWARD
        start_row = min(self.cy + 1, self.buffer.row_count() - 1)
        self.search_and_jump(start_row, self.search_context.query)

    def find_previous(self):
        self.search_context.direction = Direction.BACKWARD
        start_row = max(self.cy - 1, 0)
        self.search_and_jump(start_row, self.search_context.query)

    # Files

    def open_file(self, filename: str):
        """Load a file into the editor.

        Raises:
            OSError: if the file cannot be read
        """
        with open(filename, 'r', encoding='utf-8', errors='surrogateescape',
                  newline='') as f:
            content = f.read()
        self.buffer = LineBuffer.from_text(content)
        self.filename = filename
        self.dirty = False
        self.cx = self.cy = self.row_offset = self.col_offset = 0
        logger.info("Loaded %s (%d lines)", filename, self.buffer.row_count())

    def save(self):
        """Handle Ctrl-S: save, asking for a filename if there is none."""
        filename = self.filename
        if filename is None:
            filename = self.prompt(EditorConstants.SAVE_PROMPT)
            if not filename:
                self.set_status_message(EditorConstants.SAVE_ABORTED_MESSAGE)
                return
            # Remembered even when the write below fails
            self.filename = filename
        if self.save_file(filename):
            self.set_status_message(EditorConstants.SAVED_MESSAGE.format(filename))

    def save_file(self, filename: str) -> bool:
        """Save the document to a file atomically.

        Returns:
            True if save succeeded; on failure the status message says why
        """
        content = self.buffer.serialize()
        # Same directory so the rename stays on one filesystem
        dir_name = os.path.dirname(filename) or '.'
        temp_filename = None
        try:
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8',
                                             errors='surrogateescape', newline='',
                                             dir=dir_name,
                                             prefix='.' + os.path.basename(filename),
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(content)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.chmod(temp_filename, EditorConstants.FILE_MODE)
            os.replace(temp_filename, filename)
        except OSError as e:
            self._remove_temp_file(temp_filename)
            if isinstance(e, PermissionError):
                message = f"Can't save! Permission denied: {filename}"
            elif e.errno == errno.ENOSPC:
                message = "Can't save! No space left on device"
            else:
                message = f"Can't save! I/O error: {e.strerror or e}"
            logger.warning("Saving %s failed: %s", filename, e)
            self.set_status_message(message)
            return False

        self.filename = filename
        self.dirty = False
        logger.info("Saved %s (%d bytes)", filename, len(content.encode('utf-8', 'surrogateescape')))
        return True

    def _remove_temp_file(self, temp_filename: Optional[str]):
        if temp_filename and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError as e:
                logger.warning("Could not remove temporary file %s: %s", temp_filename, e)

    # Rendering

    def scroll(self):
        """Scroll just enough to bring the cursor on screen."""
        if self.cy < self.row_offset:
            self.row_offset = self.cy
        elif self.cy >= self.row_offset + self.screen_rows:
            self.row_offset = self.cy - self.screen_rows + 1
        if self.cx < self.col_offset:
            self.col_offset = self.cx
        elif self.cx >= self.col_offset + self.screen_cols:
            self.col_offset = self.cx - self.screen_cols + 1

    def refresh_screen(self):
        """Draw the whole frame with a single write."""
        self.scroll()
        term = self.terminal
        parts = [term.hide_cursor(), term.cursor_topleft()]
        self._draw_rows(parts)
        self._draw_status_bar(parts)
        self._draw_message_bar(parts)
        parts.append(term.move_cursor(self.cy - self.row_offset, self.cx - self.col_offset))
        parts.append(term.show_cursor())
        term.write(''.join(parts))
        term.flush()

    def _draw_rows(self, parts: list[str]):
        buffer = self.buffer
        is_empty = buffer.row_count() == 1 and buffer.column_count(0) == 0
        for y in range(self.screen_rows):
            file_row = y + self.row_offset
            if file_row < buffer.row_count():
                parts.append(self._highlighted_row(file_row))
            elif is_empty and y == self.screen_rows // 3:
                parts.append(welcome_string(self.screen_cols))
            else:
                parts.append(EditorConstants.EMPTY_ROW_MARKER)
            parts.append(self.terminal.erase_right_of_cursor())
            parts.append('\r\n')

    def _highlighted_row(self, row: int) -> str:
        # Match position comes from the whole rendered row, not the visible slice
        groups = get_highlight_groups(self.buffer.render_row(row), self.search_context.matching)
        text = self.buffer.render_slice(row, self.col_offset, self.screen_cols)
        visible = groups[self.col_offset:self.col_offset + len(text)]
        return colorize(text, visible, self.terminal.color)

    def _draw_status_bar(self, parts: list[str]):
        rows = self.buffer.row_count()
        left = "{}{} - {} lines - {} cols".format(
            self.filename or EditorConstants.NO_NAME,
            EditorConstants.MODIFIED_MARKER if self.dirty else "",
            rows,
            self.buffer.column_count(self.cy),
        )
        right = f"{self.cy + 1}/{rows}"
        parts.append(self.terminal.inverted(fit(self.screen_cols, left, right)))
        parts.append('\r\n')

    def _draw_message_bar(self, parts: list[str]):
        parts.append(self.terminal.erase_right_of_cursor())
        age = time.time() - self.status_message_time
        if self.status_message and age < EditorConstants.STATUS_MESSAGE_TIMEOUT:
            parts.append(self.status_message[:self.screen_cols])
