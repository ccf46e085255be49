"""Gottem - a modal terminal editor for chat transcripts."""

from .editor import Editor
from .model import ColorTag, CursorPosition, Document, Line
from .query import Provider, QueryRouter, QueryService
from .terminal import HeadlessScreen, ScreenSurface

__all__ = [
    'Editor',
    'ColorTag',
    'CursorPosition',
    'Document',
    'Line',
    'Provider',
    'QueryRouter',
    'QueryService',
    'HeadlessScreen',
    'ScreenSurface',
]
