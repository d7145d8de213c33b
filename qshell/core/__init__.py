"""Qt-light shell core: session state, dispatch and the line-edit guard."""

from .errors import (
    NavigationError,
    NotFoundError,
    OperationError,
    ProcessBusyError,
    ShellError,
    UnknownCommandError,
    UsageError,
)
from .events import Command, OutputEvent, OutputKind, tokenize
from .internal_commands import InternalCommandSet
from .process_runner import ExternalProcessRunner
from .prompt_guard import GuardState, KeyAction, KeyResult, PromptGuard
from .router import CommandRouter
from .session import Session

__all__ = [
    "Command",
    "CommandRouter",
    "ExternalProcessRunner",
    "GuardState",
    "InternalCommandSet",
    "KeyAction",
    "KeyResult",
    "NavigationError",
    "NotFoundError",
    "OperationError",
    "OutputEvent",
    "OutputKind",
    "ProcessBusyError",
    "PromptGuard",
    "Session",
    "ShellError",
    "UnknownCommandError",
    "UsageError",
    "tokenize",
]
