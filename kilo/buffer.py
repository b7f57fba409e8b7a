"""Line buffer: the document as a list of rows plus column arithmetic.

Rows are stored exactly as read, one character per byte of the file
(undecodable bytes are kept as lone surrogates). Two coordinate systems
are in play:

* byte columns index the stored row text, where a tab is one unit;
* render columns index the row as drawn, where a tab expands to the
  next multiple of the tab stop.

The editor keeps its cursor in render columns and converts to byte
columns before touching the text.
"""

from typing import Iterable, Optional

from .constants import EditorConstants


class LineBuffer:
    """Ordered rows of text. Never holds zero rows.

    Read-only queries accept ``row == row_count()`` and treat it as an
    empty row past the end of the document, which is where the cursor
    sits when appending.
    """

    rows: list[str]

    def __init__(self, lines: Optional[Iterable[str]] = None,
                 tab_stop: int = EditorConstants.TAB_STOP):
        self.rows = list(lines) if lines is not None else []
        if not self.rows:
            self.rows = [""]
        self.tab_stop = tab_stop

    @classmethod
    def from_text(cls, text: str, tab_stop: int = EditorConstants.TAB_STOP) -> "LineBuffer":
        """Build a buffer from newline-separated text.

        Rows split on LF only. A CR right before the LF is dropped; any
        other CR stays in the row.
        """
        lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
        if len(lines) > 1 and lines[-1] == "":
            lines.pop()
        return cls(lines, tab_stop=tab_stop)

    @property
    def lines(self) -> list[str]:
        return list(self.rows)

    def _row_text(self, row: int) -> str:
        if row == len(self.rows):
            return ""
        if not 0 <= row < len(self.rows):
            raise IndexError(f"row {row} out of range (0..{len(self.rows)})")
        return self.rows[row]

    def row_count(self) -> int:
        return len(self.rows)

    def column_count(self, row: int) -> int:
        """Length of the row in byte columns."""
        return len(self._row_text(row))

    def _tab_width_at(self, render_column: int) -> int:
        return self.tab_stop - (render_column % self.tab_stop)

    def render_row(self, row: int) -> str:
        """The row as drawn, with tabs expanded to spaces."""
        out = []
        width = 0
        for ch in self._row_text(row):
            if ch == "\t":
                pad = self._tab_width_at(width)
                out.append(" " * pad)
                width += pad
            else:
                out.append(ch)
                width += 1
        return "".join(out)

    def render_slice(self, row: int, start_column: int, max_length: int) -> str:
        """Up to max_length render columns of the row starting at start_column."""
        if max_length <= 0:
            return ""
        return self.render_row(row)[start_column:start_column + max_length]

    def visual_column_count(self, row: int) -> int:
        """Width of the row in render columns."""
        return self.to_render_column(row, self.column_count(row))

    def to_render_column(self, row: int, byte_column: int) -> int:
        text = self._row_text(row)
        render_column = 0
        for ch in text[:byte_column]:
            if ch == "\t":
                render_column += self._tab_width_at(render_column)
            else:
                render_column += 1
        return render_column

    def to_byte_column(self, row: int, render_column: int) -> int:
        """Byte column of the character drawn at render_column.

        A render column inside a tab's expansion maps to the tab itself;
        one at or past the end maps to the row length.
        """
        text = self._row_text(row)
        current = 0
        for byte_column, ch in enumerate(text):
            width = self._tab_width_at(current) if ch == "\t" else 1
            if current + width > render_column:
                return byte_column
            current += width
        return len(text)

    def adjust_to_valid_render_column(self, row: int, render_column: int) -> int:
        """Snap render_column to the nearest column that is not mid-tab.

        Ties snap to the start of the tab. The result is clamped to
        [0, visual_column_count(row)].
        """
        render_column = max(0, min(render_column, self.visual_column_count(row)))
        byte_column = self.to_byte_column(row, render_column)
        start = self.to_render_column(row, byte_column)
        if start == render_column:
            return render_column
        end = self.to_render_column(row, byte_column + 1)
        return start if render_column - start <= end - render_column else end

    def insert_character(self, row: int, column: int, ch: str):
        """Insert ch at byte column; typing on the row past the end creates it."""
        if row == len(self.rows):
            self.append_row(row - 1, "")
        text = self._row_text(row)
        column = max(0, min(column, len(text)))
        self.rows[row] = text[:column] + ch + text[column:]

    def insert_newline(self, row: int, column: int):
        """Split row at byte column into two rows."""
        if row == len(self.rows):
            self.append_row(row - 1, "")
            return
        text = self._row_text(row)
        column = max(0, min(column, len(text)))
        self.rows[row:row + 1] = [text[:column], text[column:]]

    def delete_character(self, row: int, column: int) -> bool:
        """Remove the character at byte column.

        Returns:
            False (and changes nothing) if there is no character there
        """
        text = self._row_text(row)
        if not 0 <= column < len(text):
            return False
        self.rows[row] = text[:column] + text[column + 1:]
        return True

    def join_with_previous(self, row: int) -> int:
        """Append row onto the row above it and remove it.

        Returns:
            The byte column of the join point in the merged row
        """
        if not 1 <= row < len(self.rows):
            raise ValueError(f"cannot join row {row} with its predecessor")
        join_column = len(self.rows[row - 1])
        self.rows[row - 1] += self.rows[row]
        del self.rows[row]
        return join_column

    def delete_row(self, row: int) -> bool:
        """Remove a row. Refuses to remove the last remaining row."""
        if len(self.rows) <= 1 or not 0 <= row < len(self.rows):
            return False
        del self.rows[row]
        return True

    def append_row(self, after_index: int, text: str):
        """Insert a new row after after_index (-1 inserts at the top)."""
        self.rows.insert(after_index + 1, text)

    def find_in_row(self, row: int, needle: str) -> Optional[int]:
        """Byte column of the first occurrence of needle in row, or None."""
        position = self._row_text(row).find(needle)
        return position if position >= 0 else None

    def serialize(self) -> str:
        """The whole document, one newline after every row."""
        return "".join(f"{row}\n" for row in self.rows)
