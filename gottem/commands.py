"""Command pattern implementation for editor actions, one key map per mode."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING

from .constants import EditorConstants
from .cursor import (
    move_cursor, move_to_bottom, move_to_line_end, move_to_line_start, move_to_top,
)
from .keyboard import KeyType
from .modes import Mode

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent

KeyBinding = Tuple[KeyType, str]


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """


class MovementCommand(EditorCommand):
    """Base class for cursor movement; in Visual mode it extends the selection."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        self._move(editor)
        if editor.mode is Mode.VISUAL and editor.selection is not None:
            editor.selection.active = editor.cursor.copy()
        return False

    @abstractmethod
    def _move(self, editor: 'Editor'):
        """Perform the movement."""


class StepCommand(MovementCommand):
    def __init__(self, dx: int = 0, dy: int = 0):
        self.dx = dx
        self.dy = dy

    def _move(self, editor):
        move_cursor(editor.document, editor.cursor, self.dx, self.dy)


class TopCommand(MovementCommand):
    """Second 'g' of 'gg' moves to the top; the first one only arms it."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        if editor.pending_key != 'g':
            editor.pending_key = 'g'
            return False
        editor.pending_key = None
        return super().execute(editor, key_event)

    def _move(self, editor):
        move_to_top(editor.cursor)


class BottomCommand(MovementCommand):
    def _move(self, editor):
        move_to_bottom(editor.document, editor.cursor)


class LineStartCommand(MovementCommand):
    def _move(self, editor):
        move_to_line_start(editor.cursor)


class LineEndCommand(MovementCommand):
    def _move(self, editor):
        move_to_line_end(editor.document, editor.cursor)


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        return self._edit(editor, key_event)

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Perform the edit and report whether the document changed."""


class InsertTextCommand(EditCommand):
    def _edit(self, editor, key_event):
        char = key_event.value
        if char == '\t':
            char = ' ' * EditorConstants.TAB_SPACES
        elif not char.isprintable():
            return False
        for ch in char:
            editor.document.insert_char(editor.cursor, ch)
        return True


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.document.insert_newline(editor.cursor)
        return True


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        if editor.cursor.line == 0 and editor.cursor.column == 0:
            return False
        editor.document.backspace(editor.cursor)
        return True


class PasteCommand(EditCommand):
    def _edit(self, editor, key_event):
        if not editor.register:
            editor.status_message = EditorConstants.REGISTER_EMPTY_MESSAGE
            return False
        editor.document.insert_text(editor.cursor, editor.register)
        return True


class YankCommand(EditCommand):
    def _edit(self, editor, key_event):
        span = editor.selection.normalized()
        text = editor.document.text_in_range(span.start, span.end)
        if text:
            editor.register = text
        editor.status_message = EditorConstants.YANKED_MESSAGE.format(len(text))
        editor.cursor = span.start
        editor.enter_mode(Mode.NORMAL)
        return False


class DeleteSelectionCommand(EditCommand):
    def _edit(self, editor, key_event):
        span = editor.selection.normalized()
        text = editor.document.text_in_range(span.start, span.end)
        if text:
            editor.register = text
        editor.cursor = editor.document.delete_range(span.start, span.end)
        editor.enter_mode(Mode.NORMAL)
        return bool(text)


class ModeCommand(EditorCommand):
    """Switches the editor to another mode."""

    def __init__(self, mode: Mode):
        self.mode = mode

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor.enter_mode(self.mode)
        return False


class CycleApiCommand(EditorCommand):
    def __init__(self, step: int):
        self.step = step

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor.pending_api = (editor.pending_api + self.step) % len(editor.providers)
        return False


class ConfirmApiCommand(EditorCommand):
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor.selected_api = editor.pending_api
        editor.logger.info("Selected provider %s", editor.current_provider.shortcut)
        editor.enter_mode(Mode.NORMAL)
        return False


class QuitCommand(EditorCommand):
    """Persist the transcript and stop the editor loop."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor.quit()
        return False


class SendQueryCommand(EditorCommand):
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        # The dispatcher keeps editor.modified in step with its own save
        editor.dispatcher.send_query(editor)
        return False


MOTION_KEYS: Dict[KeyBinding, Tuple[int, int]] = {
    (KeyType.REGULAR, 'h'): (-1, 0),
    (KeyType.REGULAR, 'l'): (1, 0),
    (KeyType.REGULAR, 'k'): (0, -1),
    (KeyType.REGULAR, 'j'): (0, 1),
}

ARROW_KEYS: Dict[KeyBinding, Tuple[int, int]] = {
    (KeyType.SPECIAL, 'left'): (-1, 0),
    (KeyType.SPECIAL, 'right'): (1, 0),
    (KeyType.SPECIAL, 'up'): (0, -1),
    (KeyType.SPECIAL, 'down'): (0, 1),
}

ESCAPE: KeyBinding = (KeyType.SPECIAL, 'escape')
ENTER: KeyBinding = (KeyType.SPECIAL, 'enter')


class CommandRegistry:
    """Maps (mode, key) to commands; one accelerator works in every mode."""

    def __init__(self):
        self._commands: Dict[Mode, Dict[KeyBinding, EditorCommand]] = {mode: {} for mode in Mode}
        self._global: Dict[KeyBinding, EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Send query from anywhere
        self.register_global((KeyType.CTRL, 'e'), SendQueryCommand())

        # Normal mode
        for key, (dx, dy) in {**MOTION_KEYS, **ARROW_KEYS}.items():
            self.register(Mode.NORMAL, key, StepCommand(dx, dy))
        self.register(Mode.NORMAL, (KeyType.REGULAR, 'g'), TopCommand())
        self.register(Mode.NORMAL, (KeyType.REGULAR, 'G'), BottomCommand())
        self.register(Mode.NORMAL, (KeyType.REGULAR, '0'), LineStartCommand())
        self.register(Mode.NORMAL, (KeyType.REGULAR, '$'), LineEndCommand())
        self.register(Mode.NORMAL, (KeyType.REGULAR, 'v'), ModeCommand(Mode.VISUAL))
        self.register(Mode.NORMAL, (KeyType.REGULAR, 'i'), ModeCommand(Mode.INSERT))
        self.register(Mode.NORMAL, (KeyType.REGULAR, 'a'), ModeCommand(Mode.API_SELECT))
        self.register(Mode.NORMAL, (KeyType.REGULAR, 'q'), ModeCommand(Mode.QUIT_CONFIRM))
        self.register(Mode.NORMAL, (KeyType.REGULAR, 'p'), PasteCommand())
        self.register(Mode.NORMAL, (KeyType.CTRL, 'q'), QuitCommand())

        # Insert mode
        self.register(Mode.INSERT, ESCAPE, ModeCommand(Mode.NORMAL))
        self.register(Mode.INSERT, ENTER, InsertNewlineCommand())
        self.register(Mode.INSERT, (KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        for key, (dx, dy) in ARROW_KEYS.items():
            self.register(Mode.INSERT, key, StepCommand(dx, dy))

        # Visual mode
        self.register(Mode.VISUAL, ESCAPE, ModeCommand(Mode.NORMAL))
        for key, (dx, dy) in {**MOTION_KEYS, **ARROW_KEYS}.items():
            self.register(Mode.VISUAL, key, StepCommand(dx, dy))
        self.register(Mode.VISUAL, (KeyType.REGULAR, 'y'), YankCommand())
        self.register(Mode.VISUAL, (KeyType.REGULAR, 'd'), DeleteSelectionCommand())
        self.register(Mode.VISUAL, (KeyType.REGULAR, 'x'), DeleteSelectionCommand())

        # API selection
        for key in ((KeyType.SPECIAL, 'left'), (KeyType.REGULAR, 'h')):
            self.register(Mode.API_SELECT, key, CycleApiCommand(-1))
        for key in ((KeyType.SPECIAL, 'right'), (KeyType.REGULAR, 'l')):
            self.register(Mode.API_SELECT, key, CycleApiCommand(1))
        self.register(Mode.API_SELECT, ENTER, ConfirmApiCommand())
        self.register(Mode.API_SELECT, ESCAPE, ModeCommand(Mode.NORMAL))

        # Quit confirmation
        for char in ('y', 'Y'):
            self.register(Mode.QUIT_CONFIRM, (KeyType.REGULAR, char), QuitCommand())
        for char in ('n', 'N'):
            self.register(Mode.QUIT_CONFIRM, (KeyType.REGULAR, char), ModeCommand(Mode.NORMAL))
        self.register(Mode.QUIT_CONFIRM, ESCAPE, ModeCommand(Mode.NORMAL))

    def register(self, mode: Mode, key: KeyBinding, command: EditorCommand):
        """Register a command for a key combination in one mode."""
        self._commands[mode][key] = command

    def register_global(self, key: KeyBinding, command: EditorCommand):
        self._global[key] = command

    def get_command(self, mode: Mode, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination, global bindings first."""
        command = self._global.get((key_type, value))
        if command is None:
            command = self._commands[mode].get((key_type, value))
        return command

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        if not (key_event.key_type == KeyType.REGULAR and key_event.value == 'g'):
            editor.pending_key = None

        command = self.get_command(editor.mode, key_event.key_type, key_event.value)
        if command:
            return command.execute(editor, key_event)

        # Printable text is only inserted in Insert mode; elsewhere it is ignored
        if editor.mode is Mode.INSERT and key_event.key_type == KeyType.REGULAR:
            return InsertTextCommand().execute(editor, key_event)

        return False
