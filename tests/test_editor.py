"""Test the editor controller: file loading, quitting and the main loop."""

import os
import shutil
import tempfile
import unittest
from unittest.mock import Mock, patch

from modaled.buffer import Location
from modaled.editor import Editor
from modaled.editorcommand import Size
from modaled.keyboard import KeyEvent, KeyType, ResizeEvent
from modaled.view import Mode


def key(value, key_type=KeyType.REGULAR):
    return KeyEvent(key_type=key_type, value=value, raw=value)


class TestEditor(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.terminal = Mock()
        self.terminal.query_size.return_value = Size(80, 24)
        self.editor = Editor(terminal=self.terminal)

    def tearDown(self):
        os.close(self.editor._resize_pipe_r)
        os.close(self.editor._resize_pipe_w)
        shutil.rmtree(self.temp_dir)

    def write_file(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_view_leaves_room_for_status_row(self):
        self.assertEqual(self.editor.view.size, Size(80, 23))
        self.assertEqual(self.editor.statusbar.position_y, 23)

    def test_load_existing_file(self):
        path = self.write_file("doc.txt", "one\ntwo\n")
        self.editor.load_file(path)
        self.assertEqual([str(line) for line in self.editor.view.buffer.lines], ["one", "two"])
        self.assertEqual(self.editor.view.buffer.source_path, path)

    def test_load_missing_file_starts_new_document(self):
        path = os.path.join(self.temp_dir, "new.txt")
        self.editor.load_file(path)
        self.assertTrue(self.editor.view.buffer.is_empty())
        self.assertEqual(self.editor.view.buffer.source_path, path)
        self.assertIsNone(self.editor.view.status_message)

    def test_load_unreadable_file_reports_error(self):
        self.editor.load_file(self.temp_dir)
        self.assertTrue(self.editor.view.status_message.startswith("Error:"))
        self.assertTrue(self.editor.view.buffer.is_empty())

    def test_load_starts_at_top_of_document(self):
        path = self.write_file("doc.txt", "one\ntwo\n")
        self.editor.handle_event(key('j'))
        self.editor.load_file(path)
        self.assertEqual(self.editor.view.cursor, Location(0, 0))
        self.assertEqual(self.editor.view.mode, Mode.NORMAL)

    def test_reload_after_quit_does_not_restore_cursor(self):
        path = self.write_file("doc.txt", "one\ntwo\n")
        self.editor.load_file(path)
        self.editor.running = True
        for value in "jl":
            self.editor.handle_event(key(value))
        self.editor.handle_event(key('q'))
        self.assertFalse(self.editor.running)

        self.editor.load_file(path)
        self.assertEqual(self.editor.view.cursor, Location(0, 0))
        self.assertEqual(os.listdir(self.temp_dir), ["doc.txt"])

    def test_quit_stops_the_loop(self):
        self.editor.running = True
        self.editor.handle_event(key('q'))
        self.assertFalse(self.editor.running)

    def test_keypress_clears_status_message(self):
        self.editor.view.status_message = "Saved to x"
        self.editor.handle_event(key('h'))
        self.assertIsNone(self.editor.view.status_message)

    def test_resize_event_resizes_view_and_status_bar(self):
        self.editor.handle_event(ResizeEvent(width=40, height=9))
        self.assertEqual(self.editor.view.size, Size(40, 9))
        self.assertEqual(self.editor.statusbar.width, 40)
        self.assertEqual(self.editor.statusbar.position_y, 9)

    def test_escape_key_returns_to_normal(self):
        self.editor.handle_event(key('i'))
        self.assertEqual(self.editor.view.mode, Mode.INSERT)
        self.editor.handle_event(key('escape', KeyType.SPECIAL))
        self.assertEqual(self.editor.view.mode, Mode.NORMAL)

    def test_refresh_screen_places_caret(self):
        path = self.write_file("doc.txt", "abc\n")
        self.editor.load_file(path)
        self.editor.handle_event(key('l'))
        self.editor.refresh_screen()
        self.terminal.hide_caret.assert_called_once()
        self.terminal.move_caret_to.assert_called_with(0, 1)
        self.terminal.show_caret.assert_called_once()
        self.terminal.flush.assert_called_once()
        self.terminal.print_segmented.assert_any_call(0, "abc", "", "", highlight=False)

    def test_run_handles_resize_then_quits(self):
        self.terminal.query_size.return_value = Size(60, 12)
        with patch.object(self.editor.keyboard, 'get_key_event', return_value=key('q')):
            with patch('modaled.editor.select.select') as mock_select:
                with patch('modaled.editor.os.close'):
                    mock_select.side_effect = [
                        ([self.editor._resize_pipe_r], [], []),
                        ([0], [], []),
                    ]
                    os.write(self.editor._resize_pipe_w, b'R')
                    self.editor.run()

        self.terminal.setup.assert_called_once()
        self.terminal.cleanup.assert_called_once()
        self.assertEqual(self.editor.view.size, Size(60, 11))
        self.assertFalse(self.editor.running)
        self.assertEqual(mock_select.call_count, 2)
