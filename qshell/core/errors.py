"""Shell error taxonomy.

Every error carries the exact user-visible line in ``message``; callers turn it
into an error event instead of letting it escape the dispatch path.
"""

from __future__ import annotations


class ShellError(RuntimeError):
    """Base class for failures reported back to the terminal."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = str(message)


class UsageError(ShellError):
    """Raised when a filesystem command is missing a required operand."""


class NotFoundError(ShellError):
    """Raised when a target path does not exist."""


class OperationError(ShellError):
    """Raised when a filesystem primitive fails on a valid target."""


class UnknownCommandError(ShellError):
    """Raised when a program cannot be found on the search path."""

    def __init__(self, program: str) -> None:
        super().__init__(f"Error: Command '{program}' not found.\n")
        self.program = program


class NavigationError(ShellError):
    """Raised when ``cd`` targets something that is not a usable directory."""

    def __init__(self, target: str) -> None:
        super().__init__(f"cd: no such file or directory: {target}")
        self.target = target


class ProcessBusyError(OperationError):
    """Raised when an external process is started while another is current."""

    def __init__(self, program: str) -> None:
        super().__init__(f"Error: '{program}' is still running.")
        self.program = program
