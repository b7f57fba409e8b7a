"""Pieces of the editor screen: syntax groups, status bar and welcome line."""

from enum import Enum
from typing import Callable

from .constants import EditorConstants
from .terminal import Color
from .version import get_version


class HighlightGroup(Enum):
    NORMAL = "normal"
    NUMBER = "number"
    MATCH = "match"


COLOR_OF_GROUP = {
    HighlightGroup.NORMAL: Color.DEFAULT,
    HighlightGroup.NUMBER: Color.RED,
    HighlightGroup.MATCH: Color.INV_YELLOW,
}


def get_highlight_groups(text: str, matching: str = "") -> list[HighlightGroup]:
    """Classify every character of a rendered row.

    The first occurrence of matching is MATCH; any other ASCII digit is
    NUMBER, wherever it appears.
    """
    match_start = text.find(matching) if matching else -1
    match_end = match_start + len(matching) if match_start >= 0 else -1
    groups = []
    for i, ch in enumerate(text):
        if match_start <= i < match_end:
            groups.append(HighlightGroup.MATCH)
        elif "0" <= ch <= "9":
            groups.append(HighlightGroup.NUMBER)
        else:
            groups.append(HighlightGroup.NORMAL)
    return groups


def colorize(text: str, groups: list[HighlightGroup],
             paint: Callable[[Color], str]) -> str:
    """Interleave color sequences into text wherever the group changes.

    paint maps a Color to its escape sequence. The result always ends
    back in the default color.
    """
    if len(text) != len(groups):
        raise ValueError("text and highlight groups differ in length")
    out = []
    previous = HighlightGroup.NORMAL
    for ch, group in zip(text, groups):
        if group != previous:
            out.append(paint(COLOR_OF_GROUP[group]))
            previous = group
        out.append(ch)
    out.append(paint(Color.DEFAULT))
    return "".join(out)


def fit(width: int, left: str, right: str) -> str:
    """Lay out left- and right-aligned text on a line exactly width wide.

    The right part is dropped when both do not fit.
    """
    if width <= 0:
        return ""
    left = left[:width]
    gap = width - len(left) - len(right)
    if gap < 0:
        return left.ljust(width)
    return left + " " * gap + right


def welcome_string(width: int) -> str:
    welcome = EditorConstants.WELCOME_MESSAGE.format(get_version())
    padding = " " * max(0, (width - len(welcome)) // 2 - 1)
    return (EditorConstants.EMPTY_ROW_MARKER + padding + welcome)[:width]
