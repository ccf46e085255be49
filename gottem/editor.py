"""Main editor controller for the chat transcript editor."""

import logging
from typing import Optional

from .commands import CommandRegistry
from .constants import EditorConstants
from .cursor import Selection
from .errors import PersistenceError
from .keyboard import Event, ResizeEvent
from .model import CursorPosition, Document
from .modes import Mode
from .persistence import PersistenceGateway
from .query import Provider, QueryDispatcher, QueryService
from .settings import Settings
from .terminal import ScreenSurface
from .view import ScrollManager, render_frame, viewport_rows
from .wrap import DisplayLine, locate_cursor, wrap_document


class Editor:
    """Owns the document, cursor, mode and register of one conversation.

    Everything the editor touches outside itself is injected: the screen
    it paints and reads events from, the query service, the persistence
    gateway and the logger.
    """

    def __init__(self, screen: ScreenSurface, query_service: QueryService,
                 persistence: PersistenceGateway, settings: Optional[Settings] = None,
                 conversation_id: int = EditorConstants.DEFAULT_CONVERSATION_ID,
                 logger: Optional[logging.Logger] = None):
        self.screen = screen
        self.persistence = persistence
        self.settings = settings or Settings()
        self.conversation_id = conversation_id
        self.logger = logger or logging.getLogger(__name__)

        self.providers: list[Provider] = list(self.settings.providers)
        self.selected_api = self.settings.default_provider_index()
        self.pending_api = self.selected_api

        self.document = Document()
        self.cursor = CursorPosition()
        self.mode = Mode.NORMAL
        self.selection: Optional[Selection] = None
        self.register = ""
        self.pending_key: Optional[str] = None

        self.status_message: Optional[str] = None
        self.running = False
        self.modified = False
        self.last_save_error: Optional[PersistenceError] = None
        # Set when the stored transcript exists but could not be read
        self.load_failed = False

        self.scroll = ScrollManager()
        self.display_lines: list[DisplayLine] = []
        self.dispatcher = QueryDispatcher(query_service, self.settings.save_after_query)
        self.command_registry = CommandRegistry()
        self.refresh_layout()

    @property
    def current_provider(self) -> Provider:
        return self.providers[self.selected_api]

    def wrap_width(self) -> int:
        """Configured wrap width, narrowed to fit the screen."""
        cols, _ = self.screen.size()
        return max(min(self.settings.wrap_width, cols), EditorConstants.MIN_WRAP_WIDTH)

    def enter_mode(self, mode: Mode):
        if mode is Mode.VISUAL:
            self.selection = Selection(self.cursor)
        elif mode is Mode.API_SELECT:
            self.pending_api = self.selected_api
        if mode is not Mode.VISUAL:
            self.selection = None
        self.logger.debug("Mode %s -> %s", self.mode.label, mode.label)
        self.mode = mode

    def refresh_layout(self):
        """Rewrap the document and scroll the cursor row into view."""
        _, rows = self.screen.size()
        self.document.clamp(self.cursor)
        self.display_lines = wrap_document(self.document, self.wrap_width())
        cursor_row, _ = locate_cursor(self.display_lines, self.cursor)
        self.scroll.adjust(cursor_row, len(self.display_lines), viewport_rows(rows))

    def redraw(self):
        self.refresh_layout()
        render_frame(self, self.screen)

    def load_context(self):
        """Fill the document from the stored transcript.

        A load failure leaves an empty document and reports it in the
        status line instead of aborting the session. The stored copy is then
        protected from being overwritten, see save_context.
        """
        self.load_failed = False
        try:
            text = self.persistence.load_context(self.conversation_id)
        except PersistenceError as e:
            self.logger.error("Loading conversation %s failed: %s", self.conversation_id, e)
            text = self._fail_load(e)
        except Exception as e:
            # Justification: a gateway may raise its own exception types and
            # an unreadable transcript must not end the session before it starts
            self.logger.exception("Loading conversation %s raised", self.conversation_id)
            text = self._fail_load(e)
        self.document = Document.from_text(text)
        self.cursor = self.document.end_position()
        self.modified = False
        self.refresh_layout()

    def _fail_load(self, error: Exception) -> str:
        self.load_failed = True
        self.status_message = EditorConstants.LOAD_FAILED_MESSAGE.format(error)
        return ""

    def save_context(self) -> bool:
        """Write the transcript to the persistence gateway.

        After a failed load nothing is written: an untouched document is
        skipped silently, an edited one is refused so the unreadable
        stored copy survives.

        Returns:
            True if the save succeeded or was not needed
        """
        if self.load_failed:
            if not self.modified:
                self.logger.info("Conversation %s was not loaded, skipping save",
                                 self.conversation_id)
                return True
            return self._fail_save(PersistenceError(
                EditorConstants.NOT_OVERWRITTEN_MESSAGE.format(self.conversation_id)))
        try:
            self.persistence.save_context(self.conversation_id, self.document.to_text())
        except PersistenceError as e:
            return self._fail_save(e)
        except Exception as e:
            # Justification: same boundary as load_context; the failure is
            # recorded for the exit report instead of unwinding the loop
            self.logger.exception("Saving conversation %s raised", self.conversation_id)
            return self._fail_save(PersistenceError(str(e) or type(e).__name__))
        self.last_save_error = None
        self.modified = False
        return True

    def _fail_save(self, error: PersistenceError) -> bool:
        self.last_save_error = error
        self.logger.error("Saving conversation %s failed: %s", self.conversation_id, error)
        self.status_message = EditorConstants.SAVE_FAILED_MESSAGE.format(error)
        return False

    def quit(self):
        """Persist the document and stop the loop."""
        self.save_context()
        self.running = False

    def handle_event(self, event: Event):
        """Dispatch one event through the mode state machine."""
        if isinstance(event, ResizeEvent):
            self.refresh_layout()
            return

        # Status messages last until the next key press
        self.status_message = None
        if self.command_registry.execute(self, event):
            self.modified = True
        self.refresh_layout()

    def run(self):
        """Run the main editor loop until quit or closed input.

        The document is saved on every way out of the loop, including an
        exception raised while handling a key.
        """
        self.load_context()
        self.running = True
        self.logger.info("Editing conversation %s", self.conversation_id)
        try:
            self.redraw()
            while self.running:
                event = self.screen.poll_event()
                if event is None:
                    self.logger.info("Input closed, leaving editor")
                    self.quit()
                    break
                self.handle_event(event)
                if self.running:
                    self.redraw()
        finally:
            if self.running:
                self.running = False
                self.save_context()
