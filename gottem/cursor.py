"""Cursor movement and Visual-mode selection."""

from typing import Optional

from .model import CursorPosition, Document, TextRange


def move_cursor(document: Document, cursor: CursorPosition, dx: int = 0, dy: int = 0):
    """Step the cursor by logical columns (dx) and lines (dy), in place.

    Horizontal steps wrap across line ends but never past the first or
    last line. Vertical steps clamp the column to the destination line.
    """
    document.clamp(cursor)
    for _ in range(abs(dx)):
        if dx < 0:
            _left(document, cursor)
        else:
            _right(document, cursor)
    if dy:
        cursor.line = max(0, min(cursor.line + dy, document.last_line))
        cursor.column = min(cursor.column, document.line_length(cursor.line))


def _left(document: Document, cursor: CursorPosition):
    if cursor.column > 0:
        cursor.column -= 1
    elif cursor.line > 0:
        cursor.line -= 1
        cursor.column = document.line_length(cursor.line)


def _right(document: Document, cursor: CursorPosition):
    if cursor.column < document.line_length(cursor.line):
        cursor.column += 1
    elif cursor.line < document.last_line:
        cursor.line += 1
        cursor.column = 0


def move_to_top(cursor: CursorPosition):
    cursor.line = 0
    cursor.column = 0


def move_to_bottom(document: Document, cursor: CursorPosition):
    cursor.line = document.last_line
    cursor.column = 0


def move_to_line_start(cursor: CursorPosition):
    cursor.column = 0


def move_to_line_end(document: Document, cursor: CursorPosition):
    document.clamp(cursor)
    cursor.column = document.line_length(cursor.line)


class Selection:
    """Anchor fixed at Visual-mode entry plus the moving active end."""

    def __init__(self, anchor: CursorPosition, active: Optional[CursorPosition] = None):
        self.anchor = anchor.copy()
        self.active = (active or anchor).copy()

    def normalized(self) -> TextRange:
        return TextRange.normalized(self.anchor, self.active)

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.active

    def is_selected(self, line: int, column: int) -> bool:
        """True when (line, column) lies inside the half-open selection."""
        return self.normalized().contains(line, column)
