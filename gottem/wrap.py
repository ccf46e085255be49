"""Soft wrapping of logical lines into fixed-width display lines."""

from dataclasses import dataclass

from wcwidth import wcwidth

from .model import ColorTag, CursorPosition, Document


@dataclass(frozen=True)
class DisplayLine:
    text: str
    style: ColorTag
    source_line: int
    start: int  # Code-point offset of this fragment inside its source line


def char_width(char: str) -> int:
    """Terminal cells taken by a code point; non-printing ones take none."""
    return max(wcwidth(char), 0)


def text_width(text: str) -> int:
    return sum(char_width(char) for char in text)


def wrap_text(text: str, width: int) -> tuple[list[str], list[int]]:
    """Wrap one logical line so no fragment exceeds width - 1 cells.

    Returns (fragments, starts) where starts[i] is the code-point offset of
    fragments[i] in text. An empty line yields a single empty fragment.
    """
    limit = width - 1
    fragments: list[str] = []
    starts: list[int] = []
    current: list[str] = []
    current_width = 0
    current_start = 0
    for index, char in enumerate(text):
        w = char_width(char)
        if current and current_width + w > limit:
            fragments.append("".join(current))
            starts.append(current_start)
            current = []
            current_width = 0
            current_start = index
        current.append(char)
        current_width += w
    fragments.append("".join(current))
    starts.append(current_start)
    return (fragments, starts)


def wrap_document(document: Document, width: int) -> list[DisplayLine]:
    """Derive the display lines of the whole document."""
    display: list[DisplayLine] = []
    for index, line in enumerate(document.lines):
        fragments, starts = wrap_text(line.text, width)
        for fragment, start in zip(fragments, starts):
            display.append(DisplayLine(fragment, line.style, index, start))
    return display


def locate_cursor(display: list[DisplayLine], cursor: CursorPosition) -> tuple[int, int]:
    """Map a buffer position to (display row, cell column).

    A position on a fragment boundary belongs to the later fragment, so
    the cursor sits at column 0 of the continuation row.
    """
    row = 0
    for index, dline in enumerate(display):
        if dline.source_line > cursor.line:
            break
        if dline.source_line == cursor.line and dline.start <= cursor.column:
            row = index
    dline = display[row]
    return (row, text_width(dline.text[:cursor.column - dline.start]))
