"""
Standard exit codes and error types for tagver.

Following Unix/POSIX conventions for command-line tools. The engine raises
the same exception hierarchy the CLI maps to exit codes, so a failure deep in
a git traversal surfaces with a meaningful status.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Configuration file or option error
PERMISSION_ERROR = 67    # Insufficient permissions
DATA_ERROR = 70          # Data format or validation error
NOT_A_REPOSITORY = 72    # Path is not inside a git repository
GIT_ERROR = 73           # A git command failed
CALCULATION_ERROR = 74   # Version calculation aborted
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that carries the exit code the CLI should terminate with.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised for an invalid configuration value or unknown option."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class NotAGitRepositoryError(CommandError):
    """Raised when a path is not inside a git working tree."""
    def __init__(self, path: str):
        super().__init__(f"Not a git repository: {path}", NOT_A_REPOSITORY)
        self.path = path


class GitCommandError(CommandError):
    """Raised when a required git command exits with a failure."""
    def __init__(
        self,
        command: str,
        returncode: int,
        stderr: Optional[str] = None,
        message: Optional[str] = None
    ):
        if message is None:
            message = f"git command failed ({returncode}): {command}"
            if stderr:
                message += f": {stderr.strip()}"
        super().__init__(message, GIT_ERROR)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class NoWorkTreeError(GitCommandError):
    """Raised when an operation needs a worktree and index but none exist."""


class VersionCalculationError(CommandError):
    """Raised when a version computation aborts; the cause is chained."""
    def __init__(self, message: str = "failure calculating version"):
        super().__init__(message, CALCULATION_ERROR)
