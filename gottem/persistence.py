"""Storage of conversation transcripts.

Each conversation's context is plain newline-joined text, so a load
followed by a save without edits writes back the same bytes.
"""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

import platformdirs

from .constants import EditorConstants
from .errors import PersistenceError

logger = logging.getLogger(__name__)


class PersistenceGateway(ABC):
    """Loads and saves the transcript of a conversation."""

    @abstractmethod
    def load_context(self, conversation_id: int) -> str:
        """Return the stored transcript, '' for a new conversation.

        Raises:
            PersistenceError: The transcript exists but cannot be read.
        """

    @abstractmethod
    def save_context(self, conversation_id: int, text: str) -> None:
        """Store the transcript.

        Raises:
            PersistenceError: The transcript could not be written.
        """


class MemoryContextStore(PersistenceGateway):
    """Keeps transcripts in a dictionary for the lifetime of the process."""

    def __init__(self, contexts: Optional[Dict[int, str]] = None):
        self.contexts: Dict[int, str] = dict(contexts or {})

    def load_context(self, conversation_id: int) -> str:
        return self.contexts.get(conversation_id, "")

    def save_context(self, conversation_id: int, text: str) -> None:
        self.contexts[conversation_id] = text


class FileContextStore(PersistenceGateway):
    """One UTF-8 text file per conversation in the user data directory."""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        if data_dir is None:
            data_dir = platformdirs.user_data_dir(EditorConstants.APP_NAME)
        self._directory = Path(data_dir) / EditorConstants.CONVERSATIONS_DIRNAME

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, conversation_id: int) -> Path:
        return self._directory / f"{int(conversation_id)}{EditorConstants.CONTEXT_SUFFIX}"

    def load_context(self, conversation_id: int) -> str:
        path = self.path_for(conversation_id)
        try:
            # newline='' keeps '\r\n' intact so saving writes the same bytes
            with open(path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except FileNotFoundError:
            logger.info("No stored context for conversation %s", conversation_id)
            return ""
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"cannot read {path}: {e}") from e

    def save_context(self, conversation_id: int, text: str) -> None:
        """Write the transcript atomically (temp file, fsync, rename)."""
        path = self.path_for(conversation_id)
        temp_filename = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='',
                                             dir=self._directory,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(text)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, path)
        except OSError as e:
            if temp_filename is not None and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    logger.warning("Could not remove temporary file %s", temp_filename)
            raise PersistenceError(f"cannot write {path}: {e}") from e
        logger.debug("Saved %d characters to %s", len(text), path)
