"""Constants and configuration defaults for the gottem editor."""


class EditorConstants:
    """Central configuration constants for the editor."""

    # Layout
    WRAP_WIDTH = 79  # Columns available to a display line (one cell kept free)
    MIN_WRAP_WIDTH = 2
    STATUS_ROWS = 1  # Status bar at the bottom of the screen
    TAB_SPACES = 4  # Spaces inserted for the Tab key

    # Conversations
    DEFAULT_CONVERSATION_ID = 1

    # Providers offered when the settings file names none
    DEFAULT_PROVIDERS = (
        ("Claude API", "1"),
        ("Groq", "2"),
        ("OpenAI API", "w"),
    )

    # Persistence
    APP_NAME = "gottem"
    SETTINGS_FILENAME = "settings.json"
    CONVERSATIONS_DIRNAME = "conversations"
    CONTEXT_SUFFIX = ".txt"
    ATOMIC_SAVE_SUFFIX = ".tmp"

    # Logging
    LOG_FILENAME = "gottem.log"
    LOG_MAX_BYTES = 1024 * 1024
    LOG_BACKUP_COUNT = 3

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Status messages
    SENDING_MESSAGE = "Sending to {}..."
    QUERY_FAILED_MESSAGE = "Query failed: {}"
    RESPONSE_MESSAGE = "Response from {}"
    NOTHING_TO_SEND_MESSAGE = "Nothing to send"
    LOAD_FAILED_MESSAGE = "Could not load conversation: {}"
    SAVE_FAILED_MESSAGE = "Could not save conversation: {}"
    NOT_OVERWRITTEN_MESSAGE = "conversation {} was not loaded, leaving the stored copy untouched"
    MODIFIED_MARKER = "[+]"
    QUIT_PROMPT = "Save and quit? (y, n)"
    YANKED_MESSAGE = "{} characters yanked"
    REGISTER_EMPTY_MESSAGE = "Register is empty"
