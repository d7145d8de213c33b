"""Command dispatch: built-ins, emulated filesystem commands, external programs."""

from __future__ import annotations

import os
import shutil

from loguru import logger
from PySide6.QtCore import QObject, Signal

from .errors import NavigationError, ProcessBusyError, UnknownCommandError
from .events import Command, OutputEvent, OutputKind, tokenize
from .internal_commands import InternalCommandSet
from .process_runner import ExternalProcessRunner
from .session import Session

BUILTIN_EXIT = "exit"
BUILTIN_CD = "cd"


class CommandRouter(QObject):
    """Turns submitted lines into an ordered stream of ``OutputEvent``.

    Every dispatched line ends with exactly one ``PROMPT`` event, except
    ``exit`` which ends with ``EXIT``. For external programs the prompt request
    is emitted only after the runner reports the process has exited.
    """

    eventEmitted = Signal(object)
    exitRequested = Signal()

    def __init__(
        self,
        session: Session,
        *,
        internal_commands: InternalCommandSet | None = None,
        runner: ExternalProcessRunner | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.session = session
        self.internal_commands = internal_commands or InternalCommandSet(session)
        self.runner = runner or ExternalProcessRunner(self)
        self.runner.outputReceived.connect(self._on_process_output)
        self.runner.errorReceived.connect(self._on_process_error)
        self.runner.exited.connect(self._on_process_exited)
        self.last_command = ""

    def is_busy(self) -> bool:
        return self.runner.is_running()

    def dispatch(self, raw_line: str) -> None:
        line = str(raw_line or "").strip()
        command = tokenize(line)
        if command is None:
            self._emit(OutputEvent.prompt())
            return

        self.last_command = line
        logger.debug("router.dispatch program={} args={}", command.program, list(command.args))

        if command.program == BUILTIN_EXIT:
            self._emit(OutputEvent.exit())
            self.exitRequested.emit()
            return

        if command.program == BUILTIN_CD:
            self._change_directory(command)
            self._emit(OutputEvent.prompt())
            return

        events = self.internal_commands.handle(command.program, command.args)
        if events is not None:
            for event in events:
                self._emit(event)
            self._emit(OutputEvent.prompt())
            return

        try:
            program = self.resolve_program(command.program)
        except UnknownCommandError as exc:
            logger.info("router.unknown_command program={}", command.program)
            self._emit(OutputEvent(exc.message, OutputKind.ERROR))
            self._emit(OutputEvent.prompt())
            return

        try:
            self.runner.start(program, command.args, cwd=self.session.cwd)
        except ProcessBusyError as exc:
            self._emit(OutputEvent.error(exc.message))
            self._emit(OutputEvent.prompt())

    def resolve_program(self, program: str) -> str:
        """Return an executable path for ``program`` or raise ``UnknownCommandError``."""
        if os.sep in program or (os.altsep and os.altsep in program):
            candidate = self.session.resolve(program)
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                return candidate
            raise UnknownCommandError(program)

        found = shutil.which(program)
        if not found:
            raise UnknownCommandError(program)
        return found

    def _change_directory(self, command: Command) -> None:
        target = command.args[0] if command.args else None
        try:
            new_cwd = self.session.change_directory(target)
        except NavigationError as exc:
            self._emit(OutputEvent.error(exc.message))
            return
        logger.debug("router.cd cwd={}", new_cwd)

    def _emit(self, event: OutputEvent) -> None:
        self.eventEmitted.emit(event)

    def _on_process_output(self, text: str) -> None:
        self._emit(OutputEvent(text, OutputKind.NORMAL))

    def _on_process_error(self, text: str) -> None:
        self._emit(OutputEvent(text, OutputKind.ERROR))

    def _on_process_exited(self, _code: int, _had_output: bool) -> None:
        self._emit(OutputEvent.prompt())
