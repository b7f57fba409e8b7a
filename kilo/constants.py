"""Constants and configuration for the kilo editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    KILO_VERSION = "0.1.0"

    # Document layout
    TAB_STOP = 8  # Tabs expand to the next multiple of this column

    # Keyboard timing
    READ_TIMEOUT = 0.1  # How long a key read waits before reporting no input (seconds)
    ESCAPE_SEQUENCE_TIMEOUT = 0.1  # Lookahead window after ESC (seconds)

    # Screen layout
    RESERVED_SCREEN_ROWS = 2  # Status bar and message bar

    # Session
    QUIT_TIMES = 1  # Extra Ctrl-Q presses needed to quit with unsaved changes
    STATUS_MESSAGE_TIMEOUT = 5.0  # Seconds a status message stays visible

    # File operations
    FILE_MODE = 0o644
    ATOMIC_SAVE_SUFFIX = ".tmp"

    # Status bar
    NO_NAME = "[No Name]"
    MODIFIED_MARKER = " [+]"
    EMPTY_ROW_MARKER = "~"

    # Messages
    WELCOME_MESSAGE = "Kilo editor -- version {}"
    HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"
    QUIT_WARNING_MESSAGE = "WARNING!!! File has unsaved changes. Press Ctrl-Q again to quit."
    SAVE_PROMPT = "Save as: {} (ESC to cancel)"
    SEARCH_PROMPT = "Search: {} (ESC to cancel)"
    SAVE_ABORTED_MESSAGE = "Save aborted"
    SAVED_MESSAGE = "{} written"
