"""Filesystem commands emulated in-process instead of spawning utilities."""

from __future__ import annotations

import os
import shutil
from typing import Callable, Sequence

from loguru import logger

from .errors import NotFoundError, OperationError, ShellError, UsageError
from .events import OutputEvent
from .session import Session

RM_FLAGS = frozenset({"-r", "-f", "-rf", "-fr"})

Handler = Callable[[Sequence[str]], list[OutputEvent]]


class InternalCommandSet:
    """Handles ``mkdir``, ``touch``, ``rmdir``, ``rm`` and ``mv``.

    Paths resolve against the session's working directory. Each handled call
    returns its error events followed by exactly one blank-line event; a
    failing target never aborts the remaining targets and nothing is rolled
    back.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self._handlers: dict[str, Handler] = {
            "mkdir": self._mkdir,
            "touch": self._touch,
            "rmdir": self._rmdir,
            "rm": self._rm,
            "mv": self._mv,
        }

    def handle(self, program: str, args: Sequence[str]) -> list[OutputEvent] | None:
        handler = self._handlers.get(program)
        if handler is None:
            return None
        logger.debug("internal.handle program={} args={}", program, list(args))
        try:
            events = handler(list(args))
        except ShellError as exc:
            # usage errors, and single-shot commands (mv) at their first failure
            events = [OutputEvent.error(exc.message)]
        events.append(OutputEvent.blank())
        return events

    def _each(self, names: Sequence[str], action: Callable[[str], None]) -> list[OutputEvent]:
        events: list[OutputEvent] = []
        for name in names:
            try:
                action(name)
            except ShellError as exc:
                logger.debug("internal.target.failed target={} error={}", name, exc.message)
                events.append(OutputEvent.error(exc.message))
        return events

    def _is_dot_name(self, name: str) -> bool:
        return os.path.basename(name.rstrip("/")) in (".", "..")

    def _contains_cwd(self, path: str) -> bool:
        """True when removing or moving `path` would take the session cwd with it."""
        cwd = self.session.cwd
        return cwd == path or cwd.startswith(path.rstrip(os.sep) + os.sep)

    # -------- mkdir --------
    def _mkdir(self, args: Sequence[str]) -> list[OutputEvent]:
        if not args:
            raise UsageError("mkdir: missing operand")
        return self._each(args, self._mkdir_one)

    def _mkdir_one(self, name: str) -> None:
        try:
            os.mkdir(self.session.resolve(name))
        except OSError as exc:
            raise OperationError(f"mkdir: cannot create directory '{name}'") from exc

    # -------- touch --------
    def _touch(self, args: Sequence[str]) -> list[OutputEvent]:
        if not args:
            raise UsageError("touch: missing file operand")
        return self._each(args, self._touch_one)

    def _touch_one(self, name: str) -> None:
        path = self.session.resolve(name)
        if os.path.lexists(path):
            return
        try:
            with open(path, "x", encoding="utf-8"):
                pass
        except OSError as exc:
            raise OperationError(f"touch: cannot touch '{name}'") from exc

    # -------- rmdir --------
    def _rmdir(self, args: Sequence[str]) -> list[OutputEvent]:
        if not args:
            raise UsageError("rmdir: missing operand")
        return self._each(args, self._rmdir_one)

    def _rmdir_one(self, name: str) -> None:
        path = self.session.resolve(name)
        if self._is_dot_name(name) or self._contains_cwd(path):
            raise OperationError(f"rmdir: failed to remove '{name}': Invalid argument")
        if not os.path.lexists(path):
            raise NotFoundError(f"rmdir: failed to remove '{name}': No such file or directory")
        try:
            os.rmdir(path)
        except OSError as exc:
            raise OperationError(
                f"rmdir: failed to remove '{name}': Directory not empty or permission denied"
            ) from exc

    # -------- rm --------
    def _rm(self, args: Sequence[str]) -> list[OutputEvent]:
        recursive = any(arg in RM_FLAGS for arg in args)
        paths = [arg for arg in args if arg not in RM_FLAGS]
        if not paths:
            raise UsageError("rm: missing operand")
        return self._each(paths, lambda name: self._rm_one(name, recursive=recursive))

    def _rm_one(self, name: str, *, recursive: bool) -> None:
        path = self.session.resolve(name)
        if self._is_dot_name(name) or self._contains_cwd(path):
            raise OperationError(f"rm: refusing to remove '.' or '..' directory: skipping '{name}'")
        if not os.path.lexists(path):
            raise NotFoundError(f"rm: cannot remove '{name}': No such file or directory")

        if os.path.isdir(path) and not os.path.islink(path):
            if not recursive:
                raise OperationError(f"rm: cannot remove '{name.rstrip('/')}/': Is a directory")
            try:
                shutil.rmtree(path)
            except OSError as exc:
                raise OperationError(f"rm: cannot remove '{name}': Permission denied") from exc
            return

        try:
            os.remove(path)
        except OSError as exc:
            raise OperationError(f"rm: cannot remove '{name}': Permission denied") from exc

    # -------- mv --------
    def _mv(self, args: Sequence[str]) -> list[OutputEvent]:
        if not args:
            raise UsageError("mv: missing file operand")
        if len(args) < 2:
            raise UsageError(f"mv: missing destination file operand after '{args[0]}'")
        if len(args) > 2:
            raise UsageError(f"mv: extra operand '{args[2]}'")

        source_name, destination_name = args[0], args[1]
        source = self.session.resolve(source_name)
        if not os.path.lexists(source):
            raise NotFoundError(f"mv: cannot stat '{source_name}': No such file or directory")
        if self._is_dot_name(source_name) or self._contains_cwd(source):
            raise OperationError(
                f"mv: cannot move '{source_name}' to '{destination_name}': Invalid argument"
            )

        destination = self.session.resolve(destination_name)
        if os.path.isdir(destination):
            destination = os.path.join(destination, os.path.basename(source.rstrip(os.sep)))

        try:
            shutil.move(source, destination)
        except (OSError, shutil.Error) as exc:
            raise OperationError(
                f"mv: cannot move '{source_name}' to '{destination_name}'"
            ) from exc
        return []
