"""Sending transcript text to language-model providers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from .constants import EditorConstants
from .errors import QueryError
from .model import ColorTag
from .modes import Mode

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)

# A handler answers one query given the full transcript as context
QueryHandler = Callable[[str, str], str]
ExchangeHook = Callable[[int, str, str, str], None]


@dataclass(frozen=True)
class Provider:
    name: str
    shortcut: str


class QueryService(ABC):
    """Answers queries on behalf of the editor."""

    @abstractmethod
    def handle(self, provider_id: str, query: str, conversation_id: int, context: str) -> str:
        """Return the provider's response.

        Raises:
            QueryError: The provider is unknown or failed to answer.
        """


class QueryRouter(QueryService):
    """Routes each query to the handler registered for its provider shortcut."""

    def __init__(self, handlers: Optional[dict[str, QueryHandler]] = None,
                 on_exchange: Optional[ExchangeHook] = None):
        self._handlers: dict[str, QueryHandler] = dict(handlers or {})
        self.on_exchange = on_exchange

    def register(self, shortcut: str, handler: QueryHandler):
        self._handlers[shortcut] = handler

    def handle(self, provider_id: str, query: str, conversation_id: int, context: str) -> str:
        handler = self._handlers.get(provider_id)
        if handler is None:
            raise QueryError(f"no API found for shortcut '{provider_id}'")
        try:
            response = handler(query, context)
        except QueryError:
            raise
        except Exception as e:
            # Provider clients raise their own exception types; the editor
            # only has to understand QueryError.
            raise QueryError(f"{provider_id}: {e}") from e
        if self.on_exchange is not None:
            self.on_exchange(conversation_id, provider_id, query, response)
        return response


def echo_handler(name: str) -> QueryHandler:
    """Build an offline handler that shouts the query back."""
    def handle(query: str, context: str) -> str:
        del context  # Unused
        return f"{EditorConstants.RESPONSE_MESSAGE.format(name)}: {query.upper()}"
    return handle


class QueryDispatcher:
    """Picks the text to send, calls the query service and appends the answer."""

    def __init__(self, service: QueryService, save_after_query: bool = True):
        self.service = service
        self.save_after_query = save_after_query

    def resolve_text(self, editor: 'Editor') -> str:
        """Selection text in Visual mode, else the last non-blank line."""
        if editor.mode is Mode.VISUAL and editor.selection is not None and not editor.selection.is_empty:
            span = editor.selection.normalized()
            return editor.document.text_in_range(span.start, span.end)
        return editor.document.last_non_blank_text()

    def send_query(self, editor: 'Editor') -> bool:
        """Run one blocking query round trip.

        Marks the editor modified itself, since a successful save right
        after the response leaves it clean again.

        Returns:
            True if a response was appended to the document
        """
        text = self.resolve_text(editor)
        if not text.strip():
            editor.status_message = EditorConstants.NOTHING_TO_SEND_MESSAGE
            return False

        provider = editor.current_provider
        editor.status_message = EditorConstants.SENDING_MESSAGE.format(provider.name)
        editor.redraw()

        try:
            response = self.service.handle(
                provider.shortcut, text, editor.conversation_id, editor.document.to_text()
            )
        except QueryError as e:
            editor.logger.warning("Query to %s failed: %s", provider.shortcut, e)
            editor.status_message = EditorConstants.QUERY_FAILED_MESSAGE.format(e)
            return False
        except Exception as e:
            # Justification: services other than QueryRouter may leak their
            # client's exception types. A failed query is reported in the
            # status line and never ends the session.
            editor.logger.exception("Query to %s raised", provider.shortcut)
            editor.status_message = EditorConstants.QUERY_FAILED_MESSAGE.format(e)
            return False

        editor.document.append_block(response, ColorTag.RESPONSE)
        if editor.mode is not Mode.VISUAL:
            # The selection in Visual mode still tracks the cursor
            editor.cursor = editor.document.end_position()
        editor.modified = True
        editor.status_message = EditorConstants.RESPONSE_MESSAGE.format(provider.name)
        editor.logger.info("Appended %d characters from %s", len(response), provider.shortcut)
        if self.save_after_query:
            editor.save_context()
        return True
