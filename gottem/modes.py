"""Editor modes."""

from enum import Enum


class Mode(Enum):
    """The editor is in exactly one of these at any time."""
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    API_SELECT = "api_select"
    QUIT_CONFIRM = "quit_confirm"

    @property
    def label(self) -> str:
        """Name shown in the status bar."""
        return _LABELS[self]


_LABELS = {
    Mode.NORMAL: "NORMAL",
    Mode.INSERT: "INSERT",
    Mode.VISUAL: "VISUAL",
    Mode.API_SELECT: "API",
    Mode.QUIT_CONFIRM: "QUIT",
}
