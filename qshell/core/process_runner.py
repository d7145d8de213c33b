"""Single-slot external process runner over QProcess."""

from __future__ import annotations

import codecs
import os
from typing import Sequence

from loguru import logger
from PySide6.QtCore import QObject, QProcess, Signal

from .errors import ProcessBusyError


class ExternalProcessRunner(QObject):
    """Runs at most one external program and streams its output as it arrives.

    ``exited`` fires exactly once per ``start``, after every chunk of that
    invocation has been delivered. A process that printed nothing still gets
    an empty ``outputReceived`` before ``exited`` so consumers can redisplay
    their prompt.
    """

    outputReceived = Signal(str)
    errorReceived = Signal(str)
    exited = Signal(int, bool)  # exit code, had output

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._proc = QProcess(self)
        self._proc.readyReadStandardOutput.connect(self._on_stdout_ready)
        self._proc.readyReadStandardError.connect(self._on_stderr_ready)
        self._proc.finished.connect(self._on_process_finished)
        self._proc.errorOccurred.connect(self._on_process_error)

        self._program = ""
        self._active = False
        self._had_output = False
        self._stdout_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._stderr_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def program(self) -> str:
        return self._program

    def is_running(self) -> bool:
        return self._active

    def start(self, program: str, args: Sequence[str] | None = None, *, cwd: str = "") -> None:
        if self._active:
            raise ProcessBusyError(self._program)

        self._program = str(program or "").strip()
        self._active = True
        self._had_output = False
        self._stdout_decoder.reset()
        self._stderr_decoder.reset()

        arguments = [str(item) for item in (args or [])]
        if cwd and not os.path.isdir(cwd):
            logger.warning("process.missing_cwd program={} cwd={}", self._program, cwd)
            self._had_output = True
            self.errorReceived.emit(f"Error: working directory '{cwd}' does not exist\n")
            self._finish(-1)
            return

        self._proc.setProgram(self._program)
        self._proc.setArguments(arguments)
        self._proc.setWorkingDirectory(cwd)
        logger.info("process.start program={} args={} cwd={}", self._program, arguments, cwd)
        self._proc.start()

    def _emit_stdout(self, raw: bytes, *, final: bool = False) -> None:
        text = self._stdout_decoder.decode(raw, final=final)
        if text:
            self._had_output = True
            self.outputReceived.emit(text)

    def _emit_stderr(self, raw: bytes, *, final: bool = False) -> None:
        text = self._stderr_decoder.decode(raw, final=final)
        if text:
            self._had_output = True
            self.errorReceived.emit(text)

    def _on_stdout_ready(self) -> None:
        raw = bytes(self._proc.readAllStandardOutput())
        if raw:
            self._emit_stdout(raw)

    def _on_stderr_ready(self) -> None:
        raw = bytes(self._proc.readAllStandardError())
        if raw:
            self._emit_stderr(raw)

    def _on_process_finished(self, exit_code: int, exit_status: QProcess.ExitStatus) -> None:
        if not self._active:
            return
        # Drain anything the ready-read signals have not delivered yet.
        self._emit_stdout(bytes(self._proc.readAllStandardOutput()), final=True)
        self._emit_stderr(bytes(self._proc.readAllStandardError()), final=True)
        code = int(exit_code) if exit_status == QProcess.ExitStatus.NormalExit else -1
        self._finish(code)

    def _on_process_error(self, error: QProcess.ProcessError) -> None:
        if error != QProcess.ProcessError.FailedToStart or not self._active:
            logger.debug("process.error program={} error={}", self._program, error)
            return
        logger.warning("process.failed_to_start program={} reason={}", self._program, self._proc.errorString())
        self._had_output = True
        self.errorReceived.emit(f"Error: failed to start '{self._program}'\n")
        self._finish(-1)

    def _finish(self, code: int) -> None:
        if not self._had_output:
            self.outputReceived.emit("")
        had_output = self._had_output
        self._active = False
        logger.info("process.exited program={} code={} had_output={}", self._program, code, had_output)
        self.exited.emit(code, had_output)
