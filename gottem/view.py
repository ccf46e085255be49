"""Scrolling, status bar and frame painting for the editor."""

from typing import TYPE_CHECKING

from .constants import EditorConstants
from .model import ColorTag
from .modes import Mode
from .terminal import ScreenSurface, Style
from .wrap import char_width, locate_cursor

if TYPE_CHECKING:
    from .editor import Editor


class ScrollManager:
    """Keeps the cursor's display row inside the visible window.

    The offset counts display rows, not logical lines, so a long wrapped
    line scrolls one row at a time.
    """

    def __init__(self):
        self.offset = 0

    def adjust(self, cursor_row: int, total_rows: int, viewport_rows: int) -> int:
        if viewport_rows <= 0:
            self.offset = cursor_row
            return self.offset
        if cursor_row < self.offset:
            self.offset = cursor_row
        elif cursor_row >= self.offset + viewport_rows:
            self.offset = cursor_row - viewport_rows + 1
        # Do not leave blank rows at the bottom after the document shrinks
        self.offset = max(0, min(self.offset, total_rows - viewport_rows))
        return self.offset


def viewport_rows(rows: int) -> int:
    return max(rows - EditorConstants.STATUS_ROWS, 0)


def status_text(editor: 'Editor', width: int) -> str:
    """Compose the status bar for the current mode, padded to width."""
    if editor.mode is Mode.QUIT_CONFIRM:
        return f" {EditorConstants.QUIT_PROMPT}".ljust(width)[:width]
    if editor.mode is Mode.API_SELECT:
        names = []
        for index, provider in enumerate(editor.providers):
            if index == editor.pending_api:
                names.append(f"[{provider.name}]")
            else:
                names.append(provider.name)
        return f" API: {' '.join(names)}".ljust(width)[:width]

    left = f" -- {editor.mode.label} --  {editor.current_provider.name}"
    if editor.modified:
        left += f" {EditorConstants.MODIFIED_MARKER}"
    if editor.status_message:
        left += f"  {editor.status_message}"
    right = f"{editor.cursor.line + 1}:{editor.cursor.column + 1} "
    if len(left) + len(right) > width:
        return left.ljust(width)[:width]
    return left + " " * (width - len(left) - len(right)) + right


def render_frame(editor: 'Editor', screen: ScreenSurface) -> None:
    """Paint the visible display lines and the status bar, then show them."""
    cols, rows = screen.size()
    text_rows = viewport_rows(rows)
    display = editor.display_lines
    cursor_row, cursor_x = locate_cursor(display, editor.cursor)
    selection = editor.selection if editor.mode is Mode.VISUAL else None

    for y in range(text_rows):
        index = editor.scroll.offset + y
        x = 0
        if index < len(display):
            dline = display[index]
            for i, char in enumerate(dline.text):
                w = char_width(char)
                if w == 0:
                    continue
                if x + w > cols:
                    break
                reverse = (
                    (selection is not None and selection.is_selected(dline.source_line, dline.start + i))
                    or (index == cursor_row and x == cursor_x)
                )
                style = Style(dline.style, reverse)
                screen.set_cell(x, y, char, style)
                for extra in range(1, w):
                    screen.set_cell(x + extra, y, '', style)
                x += w
        while x < cols:
            cursor_here = index == cursor_row and x == cursor_x
            screen.set_cell(x, y, ' ', Style(reverse=cursor_here))
            x += 1

    if rows > 0:
        status = status_text(editor, cols)
        status_style = Style(ColorTag.STATUS, reverse=True)
        for x, char in enumerate(status):
            screen.set_cell(x, rows - 1, char, status_style)
    screen.show()
