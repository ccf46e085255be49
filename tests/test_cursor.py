"""Test cursor movement and selection membership."""

import itertools
import random

from gottem.cursor import (
    Selection, move_cursor, move_to_bottom, move_to_line_end, move_to_line_start, move_to_top,
)
from gottem.model import CursorPosition, Document


def make_document():
    return Document.from_text("first line\n\nthird\nlast")


def test_left_at_line_start_wraps_to_previous_line_end():
    document = make_document()
    cursor = CursorPosition(2, 0)
    move_cursor(document, cursor, dx=-1)
    assert cursor == CursorPosition(1, 0)
    move_cursor(document, cursor, dx=-1)
    assert cursor == CursorPosition(0, 10)


def test_right_at_line_end_wraps_to_next_line():
    document = make_document()
    cursor = CursorPosition(0, 10)
    move_cursor(document, cursor, dx=1)
    assert cursor == CursorPosition(1, 0)


def test_no_wrap_past_document_edges():
    document = make_document()
    cursor = CursorPosition(0, 0)
    move_cursor(document, cursor, dx=-1)
    assert cursor == CursorPosition(0, 0)
    move_cursor(document, cursor, dy=-1)
    assert cursor == CursorPosition(0, 0)

    cursor = document.end_position()
    move_cursor(document, cursor, dx=1)
    assert cursor == CursorPosition(3, 4)
    move_cursor(document, cursor, dy=1)
    assert cursor == CursorPosition(3, 4)


def test_vertical_move_clamps_column():
    document = make_document()
    cursor = CursorPosition(0, 8)
    move_cursor(document, cursor, dy=1)
    assert cursor == CursorPosition(1, 0)
    move_cursor(document, cursor, dy=1)
    assert cursor == CursorPosition(2, 0)


def test_random_moves_stay_in_bounds():
    rng = random.Random(7)
    document = make_document()
    cursor = CursorPosition(0, 0)
    for _ in range(500):
        move_cursor(document, cursor, dx=rng.randint(-3, 3), dy=rng.randint(-2, 2))
        assert 0 <= cursor.line < len(document.lines)
        assert 0 <= cursor.column <= document.line_length(cursor.line)


def test_jumps():
    document = make_document()
    cursor = CursorPosition(2, 3)
    move_to_line_start(cursor)
    assert cursor == CursorPosition(2, 0)
    move_to_line_end(document, cursor)
    assert cursor == CursorPosition(2, 5)
    move_to_bottom(document, cursor)
    assert cursor == CursorPosition(3, 0)
    move_to_top(cursor)
    assert cursor == CursorPosition(0, 0)


def _grid(document):
    for line in range(len(document.lines)):
        for column in range(document.line_length(line) + 2):
            yield line, column


def test_empty_selection_selects_nothing():
    document = make_document()
    for line, column in _grid(document):
        selection = Selection(CursorPosition(line, column))
        assert selection.is_empty
        assert not any(selection.is_selected(l, c) for l, c in _grid(document))


def test_is_selected_symmetric_under_swapped_ends():
    document = make_document()
    positions = [CursorPosition(line, column) for line, column in _grid(document)]
    rng = random.Random(3)
    for a, b in rng.sample(list(itertools.product(positions, positions)), 200):
        forward = Selection(a, b)
        backward = Selection(b, a)
        for line, column in _grid(document):
            assert forward.is_selected(line, column) == backward.is_selected(line, column)


def test_multi_line_selection_membership():
    selection = Selection(CursorPosition(2, 1), CursorPosition(0, 2))
    assert not selection.is_selected(0, 1)
    assert selection.is_selected(0, 2)
    assert selection.is_selected(0, 50)
    assert selection.is_selected(1, 0)
    assert selection.is_selected(2, 0)
    assert not selection.is_selected(2, 1)
    assert not selection.is_selected(3, 0)


def test_selection_copies_its_ends():
    cursor = CursorPosition(1, 1)
    selection = Selection(cursor)
    cursor.column = 5
    assert selection.anchor == CursorPosition(1, 1)
    assert selection.active == CursorPosition(1, 1)
