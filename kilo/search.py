"""Plain substring search over a LineBuffer."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .buffer import LineBuffer


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass
class SearchContext:
    """Search state that outlives a single prompt."""
    direction: Direction = Direction.FORWARD
    query: str = ""  # Last committed query, reused by find next/previous
    matching: str = ""  # Text currently highlighted on screen


@dataclass(frozen=True)
class SearchMatch:
    row: int
    column: int  # Byte column


def find(buffer: LineBuffer, query: str, start_row: int,
         direction: Direction = Direction.FORWARD) -> Optional[SearchMatch]:
    """Find the first row at or after (before) start_row containing query.

    The scan stops at the edge of the buffer; it never wraps around.
    An empty query matches nothing.
    """
    if not query:
        return None
    step = 1 if direction == Direction.FORWARD else -1
    row = max(0, min(start_row, buffer.row_count() - 1))
    while 0 <= row < buffer.row_count():
        column = buffer.find_in_row(row, query)
        if column is not None:
            return SearchMatch(row, column)
        row += step
    return None
