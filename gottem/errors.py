"""Exception types raised by gottem components."""


class GottemError(Exception):
    """Base class for all gottem errors."""


class QueryError(GottemError):
    """A query could not be answered by the selected provider."""


class PersistenceError(GottemError):
    """Conversation context could not be loaded or saved."""


class SettingsError(GottemError):
    """The settings file contains values the editor cannot use."""
