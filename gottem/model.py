"""Line-oriented text buffer for a chat transcript, with cursor positions and ranges."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ColorTag(Enum):
    """Display color attached to every line of the transcript."""
    USER = "user"
    RESPONSE = "response"
    STATUS = "status"


@dataclass
class CursorPosition:
    line: int = 0
    column: int = 0

    def __lt__(self, other):
        if self.line != other.line:
            return self.line < other.line
        return self.column < other.column

    def __le__(self, other):
        return not other < self

    def __ge__(self, other):
        return not self < other

    def copy(self) -> "CursorPosition":
        return CursorPosition(self.line, self.column)


@dataclass(frozen=True)
class TextRange:
    """Half-open range [start, end) of buffer positions, start <= end."""
    start: CursorPosition
    end: CursorPosition

    @classmethod
    def normalized(cls, a: CursorPosition, b: CursorPosition) -> "TextRange":
        """Build a range from two positions given in either order."""
        if b < a:
            a, b = b, a
        return cls(a.copy(), b.copy())

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, line: int, column: int) -> bool:
        if line < self.start.line or line > self.end.line:
            return False
        if self.start.line == self.end.line:
            return self.start.column <= column < self.end.column
        if line == self.start.line:
            return column >= self.start.column
        if line == self.end.line:
            return column < self.end.column
        return True


@dataclass
class Line:
    text: str = ""
    style: ColorTag = ColorTag.USER


_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _split_block(text: str) -> list[str]:
    """Split text into lines, accepting any newline convention."""
    return _LINE_BREAK.split(text)


def _detect_newline(text: str) -> str:
    """Newline convention of text, by its first line break."""
    match = _LINE_BREAK.search(text)
    return match.group() if match else "\n"


class Document:
    """Line-oriented text buffer holding a chat transcript.

    Every operation keeps at least one line in the buffer. Operations that
    take a cursor update it in place, the same way typing would move it.
    """

    lines: list[Line]

    def __init__(self, lines: Optional[list[Line]] = None, newline: str = "\n"):
        self.lines = list(lines) if lines else [Line()]
        # Written between lines by to_text, so a loaded file saves unchanged
        self.newline = newline

    @classmethod
    def from_text(cls, text: str, style: ColorTag = ColorTag.USER) -> "Document":
        """Build a document from plain text in any newline convention."""
        return cls([Line(part, style) for part in _split_block(text)], _detect_newline(text))

    def to_text(self) -> str:
        return self.newline.join(line.text for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def line_length(self, index: int) -> int:
        return len(self.lines[index].text)

    @property
    def last_line(self) -> int:
        return len(self.lines) - 1

    def end_position(self) -> CursorPosition:
        return CursorPosition(self.last_line, self.line_length(self.last_line))

    def clamp(self, cursor: CursorPosition) -> CursorPosition:
        """Pull a cursor back inside the buffer bounds, in place."""
        cursor.line = max(0, min(cursor.line, self.last_line))
        cursor.column = max(0, min(cursor.column, self.line_length(cursor.line)))
        return cursor

    def _in_range(self, cursor: CursorPosition) -> bool:
        return 0 <= cursor.line < len(self.lines)

    def insert_char(self, cursor: CursorPosition, char: str):
        if not self._in_range(cursor):
            return
        line = self.lines[cursor.line]
        column = min(cursor.column, len(line.text))
        line.text = line.text[:column] + char + line.text[column:]
        cursor.column = column + len(char)

    def insert_newline(self, cursor: CursorPosition):
        if not self._in_range(cursor):
            return
        line = self.lines[cursor.line]
        column = min(cursor.column, len(line.text))
        tail = Line(line.text[column:], line.style)
        line.text = line.text[:column]
        self.lines.insert(cursor.line + 1, tail)
        cursor.line += 1
        cursor.column = 0

    def backspace(self, cursor: CursorPosition):
        if not self._in_range(cursor):
            return
        line = self.lines[cursor.line]
        if cursor.column > 0:
            column = min(cursor.column, len(line.text))
            line.text = line.text[:column - 1] + line.text[column:]
            cursor.column = column - 1
        elif cursor.line > 0:
            # Join with previous line
            previous = self.lines[cursor.line - 1]
            join_column = len(previous.text)
            previous.text += line.text
            del self.lines[cursor.line]
            cursor.line -= 1
            cursor.column = join_column

    def text_in_range(self, start: CursorPosition, end: CursorPosition) -> str:
        """Return the text of [start, end), positions in either order."""
        span = TextRange.normalized(start, end)
        first, last = span.start, span.end
        if first.line == last.line:
            return self.lines[first.line].text[first.column:last.column]
        parts = [self.lines[first.line].text[first.column:]]
        for index in range(first.line + 1, last.line):
            parts.append(self.lines[index].text)
        parts.append(self.lines[last.line].text[:last.column])
        return "\n".join(parts)

    def delete_range(self, start: CursorPosition, end: CursorPosition) -> CursorPosition:
        """Remove the text of [start, end) and return the range start."""
        span = TextRange.normalized(start, end)
        first, last = self.clamp(span.start), self.clamp(span.end)
        head = self.lines[first.line]
        tail_text = self.lines[last.line].text[last.column:]
        head.text = head.text[:first.column] + tail_text
        del self.lines[first.line + 1:last.line + 1]
        return first

    def insert_text(self, cursor: CursorPosition, text: str):
        """Splice possibly multi-line text at the cursor, moving it past the text."""
        if not self._in_range(cursor):
            return
        line = self.lines[cursor.line]
        column = min(cursor.column, len(line.text))
        parts = text.split("\n")
        after_cursor = line.text[column:]
        line.text = line.text[:column] + parts[0]
        new_lines = [Line(part, line.style) for part in parts[1:]]
        self.lines[cursor.line + 1:cursor.line + 1] = new_lines
        cursor.line += len(new_lines)
        last = self.lines[cursor.line]
        cursor.column = len(last.text)
        last.text += after_cursor

    def append_block(self, text: str, style: ColorTag):
        """Append text as new lines, replacing a lone empty line."""
        new_lines = [Line(part, style) for part in _split_block(text)]
        if len(self.lines) == 1 and not self.lines[0].text:
            self.lines = new_lines
        else:
            self.lines.extend(new_lines)

    def last_non_blank_text(self) -> str:
        """Text of the last line containing non-whitespace, or ''."""
        for line in reversed(self.lines):
            if line.text.strip():
                return line.text
        return ""
