"""Test keyboard input handling."""

import pytest
from unittest.mock import Mock

from gottem.keyboard import KeyboardHandler, KeyType


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self, tokens=()):
        self._key_queue = list(tokens)

    def get_key(self, timeout=None):
        """Mock get_key that returns from queue."""
        if self._key_queue:
            return self._key_queue.pop(0)
        return None


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


@pytest.mark.parametrize("token, key_type, value", [
    ('<LEFT>', KeyType.SPECIAL, 'left'),
    ('<DOWN>', KeyType.SPECIAL, 'down'),
    ('<ESC>', KeyType.SPECIAL, 'escape'),
    ('\x1b', KeyType.SPECIAL, 'escape'),
    ('<Ctrl-j>', KeyType.SPECIAL, 'enter'),
    ('\r', KeyType.SPECIAL, 'enter'),
    ('\n', KeyType.SPECIAL, 'enter'),
    ('<BACKSPACE>', KeyType.SPECIAL, 'backspace'),
    ('\x7f', KeyType.SPECIAL, 'backspace'),
    ('<Ctrl-h>', KeyType.SPECIAL, 'backspace'),
    ('<Ctrl-e>', KeyType.CTRL, 'e'),
    ('\x05', KeyType.CTRL, 'e'),
    ('<Ctrl-q>', KeyType.CTRL, 'q'),
    ('<SPACE>', KeyType.REGULAR, ' '),
    ('<TAB>', KeyType.REGULAR, '\t'),
    ('a', KeyType.REGULAR, 'a'),
    ('G', KeyType.REGULAR, 'G'),
    ('中', KeyType.REGULAR, '中'),
])
def test_parse_key(handler, token, key_type, value):
    event = handler.parse_key(token)
    assert event.key_type == key_type
    assert event.value == value
    assert event.raw == token


def test_ctrl_flag(handler):
    event = handler.parse_key('<Ctrl-e>')
    assert event.is_ctrl
    assert not event.is_alt


def test_alt_keys(handler):
    event = handler.parse_key('<Esc+x>')
    assert event.key_type == KeyType.ALT
    assert event.value == 'x'
    assert event.is_alt


def test_shift_arrow(handler):
    event = handler.parse_key('<Shift-LEFT>')
    assert event.key_type == KeyType.SPECIAL
    assert event.value == 'left'
    assert event.is_shift


def test_get_key_event_reads_terminal():
    handler = KeyboardHandler(MockTerminal(['<UP>', 'k']))
    assert handler.get_key_event().value == 'up'
    assert handler.get_key_event().value == 'k'
    assert handler.get_key_event() is None


def test_get_key_event_accepts_token_objects():
    token = Mock()
    token.__str__ = lambda self: '<Ctrl-e>'
    handler = KeyboardHandler(MockTerminal([token]))
    event = handler.get_key_event()
    assert event.key_type == KeyType.CTRL
    assert event.value == 'e'
