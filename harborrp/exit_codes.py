"""
Standard exit codes and error types for harborrp commands.

Every fatal error in a retention run maps to GENERAL_ERROR so scripts can
rely on a plain non-zero status.
"""
from typing import Optional

# Standard POSIX exit codes
GENERAL_ERROR = 1        # General errors
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


def exit_with_code(code: int, message: Optional[str] = None):
    """
    Exit with a specific code and optional message.

    Args:
        code: Exit code
        message: Optional message to print to stderr
    """
    import sys
    if message:
        print(message, file=sys.stderr)
    sys.exit(code)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigLoadError(CommandError):
    """Raised when the policy, config or session file is missing or unparsable."""
    def __init__(self, message: str):
        super().__init__(message, GENERAL_ERROR)


class NetworkError(CommandError):
    """Raised when a Harbor API request fails or returns a non-2xx status."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, GENERAL_ERROR)
        self.status_code = status_code


class TimestampParseError(CommandError):
    """Raised when a creation or update timestamp is not valid RFC 3339."""
    def __init__(self, message: str, value: str = ""):
        super().__init__(message, GENERAL_ERROR)
        self.value = value


class ValidationError(CommandError):
    """Raised when a confirmed interactive selection is out of range."""
    def __init__(self, message: str, value: Optional[int] = None):
        super().__init__(message, GENERAL_ERROR)
        self.value = value


class EmptyHeapError(IndexError):
    """Raised when popping from an exhausted heap."""
