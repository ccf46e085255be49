"""Test the mode state machine and its per-mode key contracts."""

import unittest

from gottem.editor import Editor
from gottem.keyboard import KeyEvent, KeyType, ctrl, key, special
from gottem.model import CursorPosition
from gottem.modes import Mode
from gottem.persistence import MemoryContextStore
from gottem.query import QueryRouter, echo_handler
from gottem.terminal import HeadlessScreen


class EditorTestCase(unittest.TestCase):
    """Editor on a headless screen with an in-memory transcript."""

    text = ""

    def setUp(self):
        self.store = MemoryContextStore({1: self.text})
        self.router = QueryRouter({"1": echo_handler("Claude API")})
        self.editor = Editor(HeadlessScreen(40, 10), self.router, self.store)
        self.editor.load_context()

    def press(self, *events):
        for event in events:
            self.editor.handle_event(event)

    def type_text(self, text):
        self.press(*[key(char) for char in text])

    def lines(self):
        return [line.text for line in self.editor.document.lines]


class TestNormalMode(EditorTestCase):
    text = "abcdef\nxyz\nlast line"

    def setUp(self):
        super().setUp()
        self.editor.cursor = CursorPosition(0, 0)

    def test_starts_in_normal_mode(self):
        self.assertIs(self.editor.mode, Mode.NORMAL)

    def test_motion_keys(self):
        self.press(key('l'), key('l'))
        self.assertEqual(self.editor.cursor, CursorPosition(0, 2))
        self.press(key('j'))
        self.assertEqual(self.editor.cursor, CursorPosition(1, 2))
        self.press(special('right'), special('down'))
        self.assertEqual(self.editor.cursor, CursorPosition(2, 3))
        self.press(key('k'), key('h'), special('left'), special('up'))
        self.assertEqual(self.editor.cursor, CursorPosition(0, 1))

    def test_printable_keys_do_not_edit(self):
        self.type_text("zxcZ")
        self.assertEqual(self.lines(), ["abcdef", "xyz", "last line"])
        self.assertFalse(self.editor.modified)

    def test_double_g_moves_to_top(self):
        self.editor.cursor = CursorPosition(2, 4)
        self.press(key('g'))
        self.assertEqual(self.editor.cursor, CursorPosition(2, 4))
        self.press(key('g'))
        self.assertEqual(self.editor.cursor, CursorPosition(0, 0))

    def test_interrupted_g_does_not_jump(self):
        self.editor.cursor = CursorPosition(2, 4)
        self.press(key('g'), key('k'), key('g'))
        self.assertEqual(self.editor.cursor, CursorPosition(1, 3))

    def test_capital_g_moves_to_bottom(self):
        self.editor.cursor = CursorPosition(0, 3)
        self.press(key('G'))
        self.assertEqual(self.editor.cursor, CursorPosition(2, 0))

    def test_line_start_and_end(self):
        self.press(key('$'))
        self.assertEqual(self.editor.cursor, CursorPosition(0, 6))
        self.press(key('0'))
        self.assertEqual(self.editor.cursor, CursorPosition(0, 0))

    def test_unmapped_keys_are_ignored(self):
        before = self.editor.cursor.copy()
        self.press(special('f1'), KeyEvent(KeyType.ALT, 'x', '<Esc+x>', is_alt=True), ctrl('z'))
        self.assertIs(self.editor.mode, Mode.NORMAL)
        self.assertEqual(self.editor.cursor, before)
        self.assertEqual(self.lines(), ["abcdef", "xyz", "last line"])


class TestInsertMode(EditorTestCase):
    def test_typing_inserts_text(self):
        self.press(key('i'))
        self.assertIs(self.editor.mode, Mode.INSERT)
        self.type_text("hijk")
        self.assertEqual(self.lines(), ["hijk"])
        self.assertTrue(self.editor.modified)
        self.press(special('escape'))
        self.assertIs(self.editor.mode, Mode.NORMAL)

    def test_enter_and_backspace(self):
        self.press(key('i'))
        self.type_text("ab")
        self.press(special('enter'))
        self.type_text("cd")
        self.assertEqual(self.lines(), ["ab", "cd"])
        self.press(special('backspace'), special('backspace'), special('backspace'))
        self.assertEqual(self.lines(), ["ab"])
        self.assertEqual(self.editor.cursor, CursorPosition(0, 2))

    def test_backspace_at_start_does_not_mark_modified(self):
        self.press(key('i'), special('backspace'))
        self.assertFalse(self.editor.modified)

    def test_tab_inserts_spaces(self):
        self.press(key('i'), KeyEvent(KeyType.REGULAR, '\t', '\t'))
        self.assertEqual(self.lines(), ["    "])

    def test_arrows_move_inside_insert_mode(self):
        self.press(key('i'))
        self.type_text("ac")
        self.press(special('left'))
        self.type_text("b")
        self.assertEqual(self.lines(), ["abc"])
        self.assertIs(self.editor.mode, Mode.INSERT)


class TestVisualMode(EditorTestCase):
    text = "abcdef\nxyz"

    def setUp(self):
        super().setUp()
        self.editor.cursor = CursorPosition(0, 0)

    def test_yank_and_paste(self):
        self.press(key('v'), key('l'), key('l'), key('l'))
        self.assertEqual(self.editor.selection.active, CursorPosition(0, 3))
        self.press(key('y'))
        self.assertIs(self.editor.mode, Mode.NORMAL)
        self.assertIsNone(self.editor.selection)
        self.assertEqual(self.editor.register, "abc")

        self.press(key('j'))
        self.assertEqual(self.editor.cursor, CursorPosition(1, 0))
        self.press(key('p'))
        self.assertEqual(self.lines(), ["abcdef", "abcxyz"])
        self.assertEqual(self.editor.cursor, CursorPosition(1, 3))

    def test_anchor_stays_fixed(self):
        self.editor.cursor = CursorPosition(0, 3)
        self.press(key('v'), key('h'), key('h'), key('l'))
        span = self.editor.selection.normalized()
        self.assertEqual(span.start, CursorPosition(0, 2))
        self.assertEqual(span.end, CursorPosition(0, 3))

    def test_delete_selection(self):
        self.press(key('v'), key('j'), key('d'))
        self.assertEqual(self.lines(), ["xyz"])
        self.assertEqual(self.editor.cursor, CursorPosition(0, 0))
        self.assertEqual(self.editor.register, "abcdef\n")
        self.assertIs(self.editor.mode, Mode.NORMAL)
        self.assertTrue(self.editor.modified)

    def test_delete_backwards_selection_puts_cursor_at_start(self):
        self.editor.cursor = CursorPosition(1, 2)
        self.press(key('v'), key('k'), key('x'))
        self.assertEqual(self.lines(), ["abz"])
        self.assertEqual(self.editor.cursor, CursorPosition(0, 2))

    def test_escape_clears_selection(self):
        self.press(key('v'), key('l'), special('escape'))
        self.assertIs(self.editor.mode, Mode.NORMAL)
        self.assertIsNone(self.editor.selection)
        self.assertEqual(self.lines(), ["abcdef", "xyz"])

    def test_empty_yank_keeps_register(self):
        self.editor.register = "kept"
        self.press(key('v'), key('y'))
        self.assertEqual(self.editor.register, "kept")

    def test_paste_with_empty_register(self):
        self.press(key('p'))
        self.assertEqual(self.lines(), ["abcdef", "xyz"])
        self.assertEqual(self.editor.status_message, "Register is empty")


class TestApiSelectMode(EditorTestCase):
    def test_cycle_and_confirm(self):
        self.press(key('a'))
        self.assertIs(self.editor.mode, Mode.API_SELECT)
        self.press(key('l'), special('right'), key('l'))
        self.assertEqual(self.editor.pending_api, 0)
        self.press(key('h'))
        self.assertEqual(self.editor.pending_api, 2)
        self.assertEqual(self.editor.selected_api, 0)
        self.press(special('enter'))
        self.assertIs(self.editor.mode, Mode.NORMAL)
        self.assertEqual(self.editor.current_provider.shortcut, "w")

    def test_cancel_keeps_selection(self):
        self.press(key('a'), special('left'), special('escape'))
        self.assertIs(self.editor.mode, Mode.NORMAL)
        self.assertEqual(self.editor.selected_api, 0)

    def test_pending_starts_at_current(self):
        self.editor.selected_api = 1
        self.press(key('a'))
        self.assertEqual(self.editor.pending_api, 1)


class TestQuitConfirmMode(EditorTestCase):
    text = "keep me"

    def setUp(self):
        super().setUp()
        self.editor.running = True

    def test_deny_returns_to_normal(self):
        for deny in (key('n'), key('N'), special('escape')):
            self.press(key('q'))
            self.assertIs(self.editor.mode, Mode.QUIT_CONFIRM)
            self.press(deny)
            self.assertIs(self.editor.mode, Mode.NORMAL)
            self.assertTrue(self.editor.running)

    def test_confirm_persists_and_stops(self):
        self.press(key('i'), key('!'), special('escape'), key('q'), key('y'))
        self.assertFalse(self.editor.running)
        self.assertEqual(self.store.contexts[1], "keep me!")

    def test_ctrl_q_quits_from_normal(self):
        self.press(ctrl('q'))
        self.assertFalse(self.editor.running)
        self.assertEqual(self.store.contexts[1], "keep me")
