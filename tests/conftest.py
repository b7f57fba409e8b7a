"""Shared test fixtures."""

import pytest

from fakes import FakeTerminal
from kilo.editor import Editor


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def make_editor():
    """Build an editor over the given lines with a fake terminal."""
    def _make(lines=None, rows=24, cols=80):
        editor = Editor(FakeTerminal(rows=rows, cols=cols))
        if lines is not None:
            editor.buffer.rows = list(lines) or [""]
        return editor
    return _make


@pytest.fixture
def press():
    """Feed bytes to an editor and handle keys until the queue is drained."""
    def _press(editor, data: bytes):
        editor.terminal.feed(data)
        while editor.terminal.pending:
            editor.process_keypress()
    return _press
