"""Kilo - a small screen-oriented terminal text editor."""

import logging

from .buffer import LineBuffer
from .editor import Editor
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .search import Direction, SearchContext, SearchMatch
from .terminal import TerminalInterface, TerminalSizeError

# The screen is in raw mode while editing; keep log records off stderr
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Direction',
    'Editor',
    'KeyboardHandler',
    'KeyEvent',
    'KeyType',
    'LineBuffer',
    'SearchContext',
    'SearchMatch',
    'TerminalInterface',
    'TerminalSizeError',
]
