"""Tests for the line buffer and its column arithmetic."""

import pytest
from kilo.buffer import LineBuffer


def test_empty_buffer_has_one_row():
    buf = LineBuffer()
    assert buf.row_count() == 1
    assert buf.lines == [""]
    assert LineBuffer([]).lines == [""]


def test_from_text_drops_final_newline():
    assert LineBuffer.from_text("a\nb\n").lines == ["a", "b"]
    assert LineBuffer.from_text("a\nb").lines == ["a", "b"]
    assert LineBuffer.from_text("").lines == [""]
    assert LineBuffer.from_text("a\n\n").lines == ["a", ""]


def test_from_text_line_endings():
    """CRLF ends a row; a lone CR is row content."""
    assert LineBuffer.from_text("a\r\nb\r\n").lines == ["a", "b"]
    assert LineBuffer.from_text("a\rb\nc\n").lines == ["a\rb", "c"]
    assert LineBuffer.from_text("x\r\r\n").lines == ["x\r"]


@pytest.mark.parametrize("text", ["one\ntwo\n", "x\n\ty\n\n", "\n", "tab\there\n"])
def test_serialize_reproduces_loaded_text(text):
    assert LineBuffer.from_text(text).serialize() == text


def test_serialize_adds_missing_trailing_newline():
    assert LineBuffer.from_text("a\nb").serialize() == "a\nb\n"


def test_column_counts_treat_tab_as_one():
    buf = LineBuffer(["a\tb"])
    assert buf.column_count(0) == 3
    assert buf.visual_column_count(0) == 9
    assert buf.render_row(0) == "a" + " " * 7 + "b"


def test_past_the_end_row_is_empty():
    buf = LineBuffer(["abc"])
    assert buf.column_count(1) == 0
    assert buf.visual_column_count(1) == 0
    assert buf.render_slice(1, 0, 10) == ""
    with pytest.raises(IndexError):
        buf.column_count(2)
    with pytest.raises(IndexError):
        buf.column_count(-1)


def test_render_slice_clips():
    buf = LineBuffer(["hello\tworld"])
    rendered = "hello   world"
    assert buf.render_slice(0, 0, 80) == rendered
    assert buf.render_slice(0, 3, 4) == rendered[3:7]
    assert buf.render_slice(0, 100, 10) == ""
    assert buf.render_slice(0, 0, 0) == ""


def test_render_and_byte_columns_with_tabs():
    buf = LineBuffer(["\tab\tc"])
    # "\t" -> 0..8, "a" -> 8, "b" -> 9, "\t" -> 10..16, "c" -> 16
    assert [buf.to_render_column(0, c) for c in range(6)] == [0, 8, 9, 10, 16, 17]
    assert buf.to_byte_column(0, 0) == 0
    assert buf.to_byte_column(0, 5) == 0  # inside the first tab
    assert buf.to_byte_column(0, 8) == 1
    assert buf.to_byte_column(0, 12) == 3
    assert buf.to_byte_column(0, 16) == 4
    assert buf.to_byte_column(0, 17) == 5
    assert buf.to_byte_column(0, 50) == 5


@pytest.mark.parametrize("row", ["", "abc", "\t", "a\tb\tc", "\t\tx", "1234567\t8"])
def test_byte_column_round_trip(row):
    buf = LineBuffer([row])
    for column in range(len(row) + 1):
        assert buf.to_byte_column(0, buf.to_render_column(0, column)) == column


def test_adjust_to_valid_render_column():
    buf = LineBuffer(["a\tb"])  # tab spans render columns 1..8
    assert buf.adjust_to_valid_render_column(0, 0) == 0
    assert buf.adjust_to_valid_render_column(0, 1) == 1
    assert buf.adjust_to_valid_render_column(0, 3) == 1
    assert buf.adjust_to_valid_render_column(0, 6) == 8
    assert buf.adjust_to_valid_render_column(0, 8) == 8
    assert buf.adjust_to_valid_render_column(0, 100) == 9
    assert buf.adjust_to_valid_render_column(0, -4) == 0


def test_insert_character():
    buf = LineBuffer(["ac"])
    buf.insert_character(0, 1, "b")
    assert buf.lines == ["abc"]
    buf.insert_character(0, 3, "d")
    assert buf.lines == ["abcd"]


def test_insert_character_past_end_appends_row():
    buf = LineBuffer(["abc"])
    buf.insert_character(1, 0, "x")
    assert buf.lines == ["abc", "x"]


def test_insert_newline_splits_row():
    buf = LineBuffer(["hello world"])
    buf.insert_newline(0, 5)
    assert buf.lines == ["hello", " world"]
    buf.insert_newline(1, 0)
    assert buf.lines == ["hello", "", " world"]
    buf.insert_newline(2, 6)
    assert buf.lines == ["hello", "", " world", ""]


def test_insert_newline_past_end_appends_row():
    buf = LineBuffer(["abc"])
    buf.insert_newline(1, 0)
    assert buf.lines == ["abc", ""]


def test_delete_character():
    buf = LineBuffer(["abc"])
    assert buf.delete_character(0, 1)
    assert buf.lines == ["ac"]
    assert not buf.delete_character(0, 2)
    assert not buf.delete_character(0, -1)
    assert buf.lines == ["ac"]


def test_insert_then_delete_restores_content():
    buf = LineBuffer(["some\ttext"])
    before = buf.lines
    buf.insert_character(0, 4, "!")
    buf.delete_character(0, 4)
    assert buf.lines == before


def test_join_with_previous():
    buf = LineBuffer(["abc", "def", "ghi"])
    assert buf.join_with_previous(1) == 3
    assert buf.lines == ["abcdef", "ghi"]
    with pytest.raises(ValueError):
        buf.join_with_previous(0)


def test_delete_row():
    buf = LineBuffer(["a", "b"])
    assert buf.delete_row(0)
    assert buf.lines == ["b"]


@pytest.mark.parametrize("text", ["", "only row", "\t"])
def test_delete_only_row_keeps_one_row(text):
    buf = LineBuffer([text])
    assert not buf.delete_row(0)
    assert buf.row_count() == 1


def test_append_row():
    buf = LineBuffer(["a", "c"])
    buf.append_row(0, "b")
    buf.append_row(-1, "top")
    buf.append_row(3, "end")
    assert buf.lines == ["top", "a", "b", "c", "end"]


def test_find_in_row():
    buf = LineBuffer(["foo bar bar"])
    assert buf.find_in_row(0, "bar") == 4
    assert buf.find_in_row(0, "baz") is None
