"""Test loading and atomic saving."""

import errno
import os

import pytest

from kilo.constants import EditorConstants

CTRL_S = b'\x13'


def test_save_file_creates_file(make_editor, tmp_path):
    """save_file writes every row followed by a newline."""
    editor = make_editor(["First line", "Second line", "Third line"])
    editor.dirty = True
    target = tmp_path / "out.txt"

    assert editor.save_file(str(target)) is True
    assert target.read_text(encoding="utf-8") == "First line\nSecond line\nThird line\n"
    assert editor.filename == str(target)
    assert editor.dirty is False
    assert target.stat().st_mode & 0o777 == EditorConstants.FILE_MODE


def test_save_file_overwrites_existing(make_editor, tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("Old content")
    editor = make_editor(["New content", "Line 2"])

    assert editor.save_file(str(target))
    assert target.read_text() == "New content\nLine 2\n"
    # No temporary files left behind
    assert os.listdir(tmp_path) == ["out.txt"]


def test_save_empty_document(make_editor, tmp_path):
    target = tmp_path / "empty.txt"
    editor = make_editor()
    assert editor.save_file(str(target))
    assert target.read_bytes() == b"\n"


def test_save_to_missing_directory_fails(make_editor, tmp_path):
    target = tmp_path / "missing" / "out.txt"
    editor = make_editor(["text"])
    editor.dirty = True

    assert editor.save_file(str(target)) is False
    assert editor.status_message.startswith("Can't save!")
    assert editor.dirty is True
    assert editor.filename is None
    assert not target.exists()


def test_permission_error_keeps_original(make_editor, tmp_path, monkeypatch):
    """A failed rename leaves the original file and no temporary file."""
    target = tmp_path / "out.txt"
    target.write_text("Original content that should not be lost")
    editor = make_editor(["New content that won't be saved"])
    editor.dirty = True

    def deny(src, dst):
        raise PermissionError(errno.EACCES, "Permission denied", dst)

    monkeypatch.setattr(os, "replace", deny)
    assert editor.save_file(str(target)) is False
    assert "Permission denied" in editor.status_message
    assert editor.dirty is True
    assert target.read_text() == "Original content that should not be lost"
    assert os.listdir(tmp_path) == ["out.txt"]


def test_disk_full_message(make_editor, tmp_path, monkeypatch):
    editor = make_editor(["text"])

    def full(fd):
        raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(os, "fsync", full)
    assert editor.save_file(str(tmp_path / "out.txt")) is False
    assert editor.status_message == "Can't save! No space left on device"
    assert os.listdir(tmp_path) == []


def test_ctrl_s_saves_to_current_file(make_editor, press, tmp_path):
    target = tmp_path / "doc.txt"
    editor = make_editor(["abc"])
    editor.filename = str(target)
    press(editor, b"x" + CTRL_S)

    assert target.read_text() == "xabc\n"
    assert not editor.dirty
    assert editor.status_message == f"{target} written"


def test_ctrl_s_prompts_for_filename(make_editor, press, tmp_path):
    target = tmp_path / "new.txt"
    editor = make_editor(["hello"])
    press(editor, CTRL_S + str(target).encode() + b"\r")

    assert editor.filename == str(target)
    assert target.read_text() == "hello\n"


def test_escape_aborts_save(make_editor, press, tmp_path):
    editor = make_editor(["hello"])
    editor.terminal.feed(CTRL_S + b"name\x1b")
    editor.terminal.feed_timeout()
    press(editor, b"")

    assert editor.filename is None
    assert editor.status_message == EditorConstants.SAVE_ABORTED_MESSAGE
    assert os.listdir(tmp_path) == []


def test_empty_filename_aborts_save(make_editor, press):
    editor = make_editor(["hello"])
    editor.dirty = True
    press(editor, CTRL_S + b"\r")

    assert editor.filename is None
    assert editor.dirty
    assert editor.status_message == EditorConstants.SAVE_ABORTED_MESSAGE


def test_open_file(make_editor, tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("one\n\ttwo\nthree\n")
    editor = make_editor()
    editor.cy, editor.cx, editor.dirty = 1, 0, True

    editor.open_file(str(source))
    assert editor.buffer.lines == ["one", "\ttwo", "three"]
    assert editor.filename == str(source)
    assert not editor.dirty
    assert (editor.cy, editor.cx) == (0, 0)


def test_open_file_strips_carriage_returns(make_editor, tmp_path):
    source = tmp_path / "dos.txt"
    source.write_bytes(b"one\r\ntwo\r\n")
    editor = make_editor()
    editor.open_file(str(source))
    assert editor.buffer.lines == ["one", "two"]


def test_lone_carriage_return_round_trip(make_editor, tmp_path):
    data = b"a\rb\nplain\n"
    source = tmp_path / "cr.txt"
    source.write_bytes(data)
    editor = make_editor()
    editor.open_file(str(source))
    assert editor.buffer.lines == ["a\rb", "plain"]
    assert editor.save_file(str(source))
    assert source.read_bytes() == data


def test_open_missing_file_raises(make_editor, tmp_path):
    editor = make_editor()
    with pytest.raises(OSError):
        editor.open_file(str(tmp_path / "nope.txt"))


def test_undecodable_bytes_round_trip(make_editor, tmp_path):
    data = b"caf\xe9 \xff\xfe\nplain\n"
    source = tmp_path / "latin1.txt"
    source.write_bytes(data)
    editor = make_editor()
    editor.open_file(str(source))
    assert editor.buffer.row_count() == 2
    assert editor.save_file(str(source))
    assert source.read_bytes() == data


def test_prompted_filename_kept_after_failed_save(make_editor, press, tmp_path):
    target = tmp_path / "later" / "doc.txt"
    editor = make_editor(["hello"])
    editor.dirty = True
    press(editor, CTRL_S + str(target).encode() + b"\r")

    assert editor.filename == str(target)
    assert editor.dirty
    assert editor.status_message.startswith("Can't save!")

    # The second Ctrl-S writes straight away; a prompt would run out of input
    target.parent.mkdir()
    press(editor, CTRL_S)
    assert target.read_text() == "hello\n"
    assert not editor.dirty
