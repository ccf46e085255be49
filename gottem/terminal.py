"""Screen surfaces: Blessed for display, Curtsies for input, and a headless recorder."""

import logging
import os
import select
import signal
import sys
import termios
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional

import blessed

from .constants import EditorConstants
from .keyboard import Event, KeyboardHandler, ResizeEvent
from .model import ColorTag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Style:
    color: ColorTag = ColorTag.USER
    reverse: bool = False


BLANK = (" ", Style())


class ScreenSurface(ABC):
    """Minimal drawing and input capability the editor depends on.

    A cell holding '' is the right half of a wide glyph drawn in the cell
    to its left.
    """

    @abstractmethod
    def size(self) -> tuple[int, int]:
        """Return (cols, rows)."""

    @abstractmethod
    def set_cell(self, x: int, y: int, char: str, style: Style) -> None:
        ...

    @abstractmethod
    def show(self) -> None:
        """Make everything drawn since the last call visible."""

    @abstractmethod
    def poll_event(self) -> Optional[Event]:
        """Block for the next event; None once the input is closed."""


class HeadlessScreen(ScreenSurface):
    """Records cells in memory and replays a scripted list of events."""

    def __init__(self, cols: int = 80, rows: int = 24, events: Iterable[Event] = ()):
        self.cols = cols
        self.rows = rows
        self.events = deque(events)
        self.frames_shown = 0
        self._cells = self._blank_grid()

    def _blank_grid(self):
        return [[BLANK] * self.cols for _ in range(self.rows)]

    def size(self) -> tuple[int, int]:
        return (self.cols, self.rows)

    def set_cell(self, x: int, y: int, char: str, style: Style) -> None:
        if 0 <= x < self.cols and 0 <= y < self.rows:
            self._cells[y][x] = (char, style)

    def show(self) -> None:
        self.frames_shown += 1

    def poll_event(self) -> Optional[Event]:
        if not self.events:
            return None
        event = self.events.popleft()
        if isinstance(event, ResizeEvent):
            self.resize(event.cols, event.rows)
        return event

    def resize(self, cols: int, rows: int) -> None:
        self.cols = cols
        self.rows = rows
        self._cells = self._blank_grid()

    def cell(self, x: int, y: int) -> tuple[str, Style]:
        return self._cells[y][x]

    def row_text(self, y: int) -> str:
        """Characters of row y with trailing blanks removed."""
        return "".join(char for char, _ in self._cells[y]).rstrip()


class BlessedScreen(ScreenSurface):
    """Paints a real terminal with Blessed and reads keys through Curtsies."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        self.term = terminal or blessed.Terminal()
        self.keyboard = KeyboardHandler(self)
        self._cells: list[list[tuple[str, Style]]] = []
        self._last_rows: Optional[list[str]] = None
        self._curtsies_input: Optional[object] = None
        self._old_tty_settings = None
        self._old_winch_handler = None
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None
        self.is_fullscreen = False

    def setup(self):
        """Enter fullscreen, raw input and resize signalling."""
        print(self.term.enter_fullscreen + self.term.hide_cursor + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        try:
            from curtsies import Input  # type: ignore
            self._curtsies_input = Input(keynames='curtsies')  # type: ignore
            self._curtsies_input.__enter__()
        except Exception:
            # Justification: curtsies may fail to initialize without a tty
            # (CI, pipes). poll_event then reports closed input and the
            # editor exits through its normal save path.
            logger.exception("Could not initialize curtsies input")
            self._curtsies_input = None
        self._disable_flow_control()
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self._old_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

    def _disable_flow_control(self):
        # Ctrl-Q and Ctrl-S must reach the editor instead of the tty driver
        try:
            self._old_tty_settings = termios.tcgetattr(sys.stdin)
            new_settings = list(self._old_tty_settings)
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
        except (termios.error, AttributeError, OSError):
            self._old_tty_settings = None

    def _handle_resize(self, signum, frame):
        del signum, frame  # Unused
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def close(self):
        """Restore the terminal to the state setup() found it in."""
        if self._old_winch_handler is not None:
            signal.signal(signal.SIGWINCH, self._old_winch_handler)
            self._old_winch_handler = None
        for fd in (self._resize_pipe_r, self._resize_pipe_w):
            if fd is not None:
                os.close(fd)
        self._resize_pipe_r = self._resize_pipe_w = None
        if self._old_tty_settings is not None:
            try:
                termios.tcsetattr(sys.stdin, termios.TCSANOW, self._old_tty_settings)
            except (termios.error, OSError):
                logger.warning("Could not restore terminal settings")
            self._old_tty_settings = None
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)  # type: ignore
            finally:
                self._curtsies_input = None
        if self.is_fullscreen:
            print(self.term.exit_fullscreen + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    def size(self) -> tuple[int, int]:
        return (self.term.width, self.term.height)

    def _ensure_grid(self):
        cols, rows = self.size()
        if len(self._cells) != rows or (self._cells and len(self._cells[0]) != cols):
            self._cells = [[BLANK] * cols for _ in range(rows)]
            self._last_rows = None

    def set_cell(self, x: int, y: int, char: str, style: Style) -> None:
        self._ensure_grid()
        if 0 <= y < len(self._cells) and 0 <= x < len(self._cells[y]):
            self._cells[y][x] = (char, style)

    def _style_codes(self, style: Style) -> str:
        codes = [self.term.normal]
        if style.color is ColorTag.RESPONSE:
            codes.append(self.term.cyan)
        elif style.color is ColorTag.STATUS:
            codes.append(self.term.bold)
        if style.reverse:
            codes.append(self.term.reverse)
        return ''.join(codes)

    def _compose_row(self, cells: list[tuple[str, Style]]) -> str:
        out = []
        active: Optional[Style] = None
        for char, style in cells:
            if char == '':
                continue
            if style != active:
                out.append(self._style_codes(style))
                active = style
            out.append(char)
        out.append(self.term.normal)
        return ''.join(out)

    def show(self) -> None:
        """Write only the rows that changed since the previous frame."""
        self._ensure_grid()
        rows = [self._compose_row(cells) for cells in self._cells]
        if self._last_rows is None or len(self._last_rows) != len(rows):
            print(self.term.home + self.term.clear, end='')
            self._last_rows = [''] * len(rows)
        for y, row in enumerate(rows):
            if row != self._last_rows[y]:
                print(self.term.move(y, 0) + row, end='')
                self._last_rows[y] = row
        print('', end='', flush=True)

    def get_key(self, timeout=None):
        """Read one curtsies token, or None when input is unavailable."""
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            r, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not r:
                return None
        return str(next(self._curtsies_input))

    def poll_event(self) -> Optional[Event]:
        if self._curtsies_input is None:
            return None
        while True:
            ready, _, _ = select.select([sys.stdin, self._resize_pipe_r], [], [])
            if self._resize_pipe_r in ready:
                os.read(self._resize_pipe_r, 1024)
                self._last_rows = None
                cols, rows = self.size()
                return ResizeEvent(cols, rows)
            event = self.keyboard.get_key_event(timeout=0)
            if event is not None:
                return event
