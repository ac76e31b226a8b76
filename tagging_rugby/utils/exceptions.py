"""
Custom exception hierarchy for tagging-rugby.

Provides structured error types for the player channel, the store,
the export pipeline and the command interpreter.
All exceptions inherit from TaggingRugbyError for easy catching.
"""


class TaggingRugbyError(Exception):
    """
    Base exception for all tagging-rugby errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize tagging-rugby error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class PlayerError(TaggingRugbyError):
    """
    Base exception for media player operations.
    Raised for any failure talking to the player over IPC.
    """

    pass


class NotConnectedError(PlayerError):
    """
    Player client is not connected.
    Raised when a command is sent on a closed or never-opened client.
    """

    def __init__(self, message: str = "not connected to mpv", context: dict | None = None):
        super().__init__(message, context)


class SocketNotFoundError(PlayerError):
    """
    Player IPC socket is absent.
    Raised when dialing the socket fails, usually because the player is not running.
    """

    def __init__(
        self,
        message: str = "socket not found - is mpv running with --input-ipc-server?",
        context: dict | None = None,
    ):
        super().__init__(message, context)


class TransportError(PlayerError):
    """
    IPC transport errors.
    Raised when writing a request or reading a response fails.
    """

    pass


class ProtocolError(PlayerError):
    """
    IPC protocol errors.
    Raised when a decoded value does not have the expected type.
    """

    pass


class PlayerCommandError(PlayerError):
    """
    Player-side command failures.
    Raised when the player answers with an error other than "success".
    """

    def __init__(self, error: str, context: dict | None = None):
        super().__init__(f"mpv: {error}", context)
        self.error = error


class StoreError(TaggingRugbyError):
    """
    Base exception for store operations.
    Used for errors related to data storage operations.
    """

    pass


class MigrationError(StoreError):
    """
    Schema migration errors.
    Raised when a migration file cannot be parsed or applied.
    """

    pass


class ValidationError(TaggingRugbyError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(TaggingRugbyError):
    """
    Resource not found errors.
    Raised when a requested note or video doesn't exist.
    """

    pass


class ConfigurationError(TaggingRugbyError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class DependencyError(TaggingRugbyError):
    """
    External binary errors.
    Raised when a required program is not on PATH.
    """

    pass


class EncoderMissingError(DependencyError):
    """
    Video encoder is not installed.
    Raised before an export starts when ffmpeg cannot be found.
    """

    pass


class ExportError(TaggingRugbyError):
    """
    Clip export errors.
    Raised for filesystem or encoder failures while exporting clips.
    """

    pass


class CommandError(TaggingRugbyError):
    """
    Colon command errors.
    Raised for unknown commands and bad arguments.
    """

    pass
