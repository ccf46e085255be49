"""Test wrap-aware scrolling."""

import unittest

from gottem.editor import Editor
from gottem.keyboard import key
from gottem.persistence import MemoryContextStore
from gottem.query import QueryRouter
from gottem.terminal import HeadlessScreen
from gottem.view import ScrollManager, viewport_rows


class TestScrollManager(unittest.TestCase):
    def test_scrolls_down_to_cursor(self):
        scroll = ScrollManager()
        self.assertEqual(scroll.adjust(30, 50, 10), 21)

    def test_scrolls_up_to_cursor(self):
        scroll = ScrollManager()
        scroll.offset = 21
        self.assertEqual(scroll.adjust(5, 50, 10), 5)

    def test_keeps_offset_while_cursor_visible(self):
        scroll = ScrollManager()
        scroll.offset = 4
        self.assertEqual(scroll.adjust(8, 50, 10), 4)

    def test_clamps_after_document_shrinks(self):
        scroll = ScrollManager()
        scroll.offset = 21
        self.assertEqual(scroll.adjust(11, 12, 10), 2)

    def test_short_document_never_scrolls(self):
        scroll = ScrollManager()
        self.assertEqual(scroll.adjust(3, 4, 10), 0)

    def test_viewport_excludes_status_row(self):
        self.assertEqual(viewport_rows(24), 23)
        self.assertEqual(viewport_rows(0), 0)


def make_editor(text, cols=20, rows=6):
    screen = HeadlessScreen(cols, rows)
    editor = Editor(screen, QueryRouter(), MemoryContextStore({1: text}))
    editor.load_context()
    editor.redraw()
    return editor, screen


def test_cursor_at_end_of_long_document_is_visible():
    text = "\n".join(f"line {n}" for n in range(30))
    editor, screen = make_editor(text)
    assert editor.scroll.offset == 25
    assert screen.row_text(4) == "line 29"

    editor.handle_event(key('g'))
    editor.handle_event(key('g'))
    editor.redraw()
    assert editor.scroll.offset == 0
    assert screen.row_text(0) == "line 0"


def test_scroll_counts_display_rows_not_lines():
    # Two logical lines that wrap into eight display rows at width 20
    text = "x" * 76 + "\n" + "y" * 76
    editor, screen = make_editor(text)
    assert len(editor.display_lines) == 8
    assert editor.scroll.offset == 3
    assert screen.row_text(0) == "x" * 19
    assert screen.row_text(4) == "y" * 19
