"""Test Buffer structural edits, loading and saving."""

import os
import tempfile

import pytest

from modaled.buffer import Buffer, FileError, Location


def lines_of(buffer):
    return [str(line) for line in buffer.lines]


def test_from_text_splits_on_newlines():
    buffer = Buffer.from_text("abc\nde\n")
    assert lines_of(buffer) == ["abc", "de"]
    assert buffer.height() == 2
    assert not buffer.dirty


def test_from_text_keeps_interior_empty_lines():
    assert lines_of(Buffer.from_text("a\n\nb")) == ["a", "", "b"]
    assert lines_of(Buffer.from_text("a\n\n")) == ["a", ""]


def test_empty_text_is_empty_buffer():
    buffer = Buffer.from_text("")
    assert buffer.is_empty()
    assert buffer.height() == 0


def test_save_then_load_round_trip():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "doc.txt")
        buffer = Buffer.from_text("first\n\nthird 日本\n", source_path=path)
        buffer.dirty = True
        buffer.save()
        assert not buffer.dirty

        with open(path, 'r', encoding='utf-8') as f:
            assert f.read() == "first\n\nthird 日本\n"

        loaded = Buffer.load(path)
        assert lines_of(loaded) == ["first", "", "third 日本"]
        assert loaded.source_path == path
        assert not loaded.dirty


def test_save_writes_trailing_newline_on_last_line():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "t.txt")
        buffer = Buffer.from_text("hi", source_path=path)
        buffer.save()
        with open(path, 'rb') as f:
            assert f.read() == b"hi\n"


def test_save_leaves_no_temp_files():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "t.txt")
        Buffer.from_text("x", source_path=path).save()
        assert os.listdir(temp_dir) == ["t.txt"]


def test_save_failure_keeps_dirty_flag():
    buffer = Buffer.from_text("data", source_path="/nonexistent_dir_for_modaled/out.txt")
    buffer.insert_char("x", Location(0, 0))
    assert buffer.dirty

    with pytest.raises(FileError) as excinfo:
        buffer.save()

    assert buffer.dirty
    assert excinfo.value.path == "/nonexistent_dir_for_modaled/out.txt"
    assert isinstance(excinfo.value.__cause__, OSError)


def test_load_missing_file():
    with pytest.raises(FileError) as excinfo:
        Buffer.load("/nonexistent_dir_for_modaled/missing.txt")
    assert excinfo.value.is_missing


def test_load_directory_is_not_missing():
    with tempfile.TemporaryDirectory() as temp_dir:
        with pytest.raises(FileError) as excinfo:
            Buffer.load(temp_dir)
    assert not excinfo.value.is_missing


def test_load_invalid_utf8():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "bad.txt")
        with open(path, 'wb') as f:
            f.write(b"\xff\xfe\xfa")
        with pytest.raises(FileError) as excinfo:
            Buffer.load(path)
    assert excinfo.value.reason == "Not valid UTF-8"


def test_insert_char_into_line():
    buffer = Buffer.from_text("ac")
    buffer.insert_char("b", Location(0, 1))
    assert lines_of(buffer) == ["abc"]
    assert buffer.dirty


def test_insert_char_on_line_past_end_appends_line():
    buffer = Buffer.from_text("abc")
    buffer.insert_char("x", Location(1, 0))
    assert lines_of(buffer) == ["abc", "x"]


def test_insert_char_far_past_end_is_noop():
    buffer = Buffer.from_text("abc")
    buffer.insert_char("x", Location(5, 0))
    assert lines_of(buffer) == ["abc"]
    assert not buffer.dirty


def test_delete_interior_grapheme():
    buffer = Buffer.from_text("abc")
    buffer.delete(Location(0, 1))
    assert lines_of(buffer) == ["ac"]
    assert buffer.dirty


def test_delete_at_end_of_line_joins_next_line():
    buffer = Buffer.from_text("ab\ncd\nef")
    buffer.delete(Location(0, 2))
    assert lines_of(buffer) == ["abcd", "ef"]
    assert buffer.dirty


def test_delete_at_end_of_last_line_is_noop():
    buffer = Buffer.from_text("ab")
    buffer.delete(Location(0, 2))
    assert lines_of(buffer) == ["ab"]
    assert not buffer.dirty


def test_delete_past_last_line_is_noop():
    buffer = Buffer.from_text("ab")
    buffer.delete(Location(1, 0))
    buffer.delete(Location(7, 3))
    assert lines_of(buffer) == ["ab"]
    assert not buffer.dirty


def test_insert_line_splits():
    buffer = Buffer.from_text("abc\nde")
    buffer.insert_line(Location(0, 1))
    assert lines_of(buffer) == ["a", "bc", "de"]
    assert buffer.dirty


def test_insert_line_at_end_of_line():
    buffer = Buffer.from_text("abc\nde")
    buffer.insert_line(Location(0, 3))
    assert lines_of(buffer) == ["abc", "", "de"]


def test_insert_line_past_end_appends_empty_line():
    buffer = Buffer.from_text("abc")
    buffer.insert_line(Location(1, 0))
    assert lines_of(buffer) == ["abc", ""]
    buffer.insert_line(Location(9, 0))
    assert lines_of(buffer) == ["abc", ""]


def test_delete_line_range_within_row():
    buffer = Buffer.from_text("abcdef")
    buffer.delete_line(0, 1, 4)
    assert lines_of(buffer) == ["aef"]
    assert buffer.dirty


def test_delete_line_on_missing_row_is_noop():
    buffer = Buffer.from_text("abc")
    buffer.delete_line(3, 0, 2)
    assert lines_of(buffer) == ["abc"]
    assert not buffer.dirty


def test_delete_range_across_lines():
    buffer = Buffer.from_text("abc\ndef\nghi\njkl")
    buffer.delete_range(Location(0, 1), Location(2, 1))
    assert lines_of(buffer) == ["ahi", "jkl"]


def test_delete_range_to_start_of_next_line():
    buffer = Buffer.from_text("abc\ndef")
    buffer.delete_range(Location(0, 3), Location(1, 0))
    assert lines_of(buffer) == ["abcdef"]


def test_delete_range_ending_past_last_line():
    buffer = Buffer.from_text("abc\ndef")
    buffer.delete_range(Location(0, 1), Location(2, 0))
    assert lines_of(buffer) == ["a"]


def test_insert_text_multiline():
    buffer = Buffer.from_text("abc")
    end = buffer.insert_text("x\ny", Location(0, 1))
    assert lines_of(buffer) == ["ax", "ybc"]
    assert end == Location(1, 1)
    assert buffer.dirty


def test_insert_text_into_empty_buffer():
    buffer = Buffer()
    end = buffer.insert_text("hi", Location(0, 0))
    assert lines_of(buffer) == ["hi"]
    assert end == Location(0, 2)


def test_insert_text_with_trailing_newline():
    buffer = Buffer.from_text("ab")
    buffer.insert_text("x\n", Location(0, 1))
    assert lines_of(buffer) == ["ax", "b"]


def test_location_ordering():
    assert Location(0, 5) < Location(1, 0)
    assert Location(1, 2) < Location(1, 3)
    assert Location(2, 0) == Location(2, 0)
    assert max(Location(3, 1), Location(3, 0)) == Location(3, 1)
