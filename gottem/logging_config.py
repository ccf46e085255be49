"""Logging setup for the gottem editor.

The editor owns the terminal, so records go to a rotating file in the
user log directory and never to the console. ``setup_logging`` never
raises: when the log directory cannot be created it falls back to the
system temp directory and reports the problem on stderr.
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional, Union

import platformdirs

from .constants import EditorConstants
from .settings import Settings

logger = logging.getLogger("gottem")


def setup_logging(settings: Optional[Settings] = None,
                  log_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """Attach a rotating file handler to the ``gottem`` logger.

    Calling it again replaces the previous handler, so tests can run it
    repeatedly without duplicate records.

    Args:
        settings: Supplies ``log_level``; defaults are used when None.
        log_dir: Directory for gottem.log; the platform log dir when None.

    Returns:
        The configured ``gottem`` logger.
    """
    settings = settings or Settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if log_dir is None:
        log_dir = platformdirs.user_log_dir(EditorConstants.APP_NAME)

    log_path = Path(log_dir) / EditorConstants.LOG_FILENAME
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error creating log directory '{log_path.parent}': {e}", file=sys.stderr)
        log_path = Path(tempfile.gettempdir()) / EditorConstants.LOG_FILENAME

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    try:
        file_handler = logging.handlers.RotatingFileHandler(
            os.fspath(log_path),
            maxBytes=EditorConstants.LOG_MAX_BYTES,
            backupCount=EditorConstants.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        print(f"Error setting up file logger for '{log_path}': {e}", file=sys.stderr)
        logger.addHandler(logging.NullHandler())
    else:
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)-8s - %(name)-18s - %(message)s"
        ))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    logger.setLevel(level)
    # Records stay out of the root logger, which may print to the terminal
    logger.propagate = False
    logger.debug("Logging to %s at level %s", log_path, logging.getLevelName(level))
    return logger
