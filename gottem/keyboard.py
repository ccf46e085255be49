"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw token from the input source
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False


@dataclass
class ResizeEvent:
    """The terminal changed size; only a repaint is needed."""
    cols: int = 0
    rows: int = 0


Event = Union[KeyEvent, ResizeEvent]


SPECIAL_KEYS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'insert', 'f1',
}


def key(value: str) -> KeyEvent:
    """Build the event a plain printable key produces."""
    return KeyEvent(key_type=KeyType.REGULAR, value=value, raw=value)


def special(value: str) -> KeyEvent:
    return KeyEvent(key_type=KeyType.SPECIAL, value=value, raw=f'<{value.upper()}>')


def ctrl(letter: str) -> KeyEvent:
    return KeyEvent(key_type=KeyType.CTRL, value=letter, raw=f'<Ctrl-{letter}>', is_ctrl=True)


class KeyboardHandler:
    """Turns curtsies key names and raw characters into KeyEvents."""

    def __init__(self, terminal_interface=None):
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Read the next token from the terminal and parse it."""
        token = self.terminal.get_key(timeout)
        if not token:
            return None
        return self.parse_key(token)

    def parse_key(self, token) -> KeyEvent:
        """Parse a curtsies token such as '<LEFT>', '<Ctrl-e>' or 'a'."""
        key_str = str(token)

        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            return self._parse_named(key_str)

        # Single-byte ASCII control chars (Ctrl-<letter>)
        if len(key_str) == 1:
            o = ord(key_str)
            if o in (8, 127):
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if o == 9:
                return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                ch = chr(ord('a') + o - 1)
                # Ctrl-J/Ctrl-M arrive for the Enter key
                if ch in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)

        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)

        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)

    def _parse_named(self, key_str: str) -> KeyEvent:
        name = key_str[1:-1]
        # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
        lower = name.lower().replace('+', '-')
        parts = lower.split('-') if len(lower) > 1 and '-' in lower else [lower]
        base = parts[-1]
        mods = set(parts[:-1])
        if 'meta' in mods or 'esc' in mods:
            mods.add('alt')
        if base in ('pageup', 'page_up'):
            base = 'page_up'
        elif base in ('pagedown', 'page_down'):
            base = 'page_down'

        if base in ('space', 'spacebar', 'spc') and not mods:
            return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=key_str)
        if base == 'tab' and not mods:
            return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=key_str)
        if base in ('esc', 'escape') and not mods:
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)
        if 'ctrl' in mods and len(base) == 1:
            if base in ('j', 'm'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
            if base == 'h':
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
        if 'alt' in mods:
            return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str, is_alt=True)
        if base in SPECIAL_KEYS:
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str,
                            is_shift='shift' in mods)
        # Unknown names still reach the dispatcher, which ignores them
        return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str)
