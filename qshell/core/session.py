"""Per-window shell state: identity, working directory and prompt derivation."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from pathlib import Path

from .errors import NavigationError

DEFAULT_PROMPT_TEMPLATE = "{username}@{hostname}:{cwd}$ "
UNKNOWN_USER = "Unknown User"


def _is_usable_dir(path: str) -> bool:
    return os.path.isdir(path) and os.access(path, os.R_OK | os.X_OK)


@dataclass
class Session:
    username: str
    hostname: str
    home_dir: str
    cwd: str
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE

    def __post_init__(self) -> None:
        self.home_dir = os.path.normpath(os.path.abspath(self.home_dir))
        self.cwd = os.path.normpath(os.path.abspath(self.cwd))
        if not _is_usable_dir(self.cwd):
            raise NavigationError(self.cwd)

    @classmethod
    def from_environment(
        cls,
        *,
        start_dir: str | None = None,
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        environ: dict[str, str] | None = None,
    ) -> "Session":
        env = os.environ if environ is None else environ
        username = env.get("USER") or env.get("USERNAME") or UNKNOWN_USER
        home_dir = env.get("HOME") or str(Path.home())
        if not _is_usable_dir(home_dir):
            home_dir = str(Path.home())

        cwd = home_dir
        candidate = str(start_dir or "").strip()
        if candidate:
            candidate = os.path.expanduser(candidate)
            if _is_usable_dir(candidate):
                cwd = candidate

        return cls(
            username=username,
            hostname=socket.gethostname(),
            home_dir=home_dir,
            cwd=cwd,
            prompt_template=str(prompt_template or DEFAULT_PROMPT_TEMPLATE),
        )

    def display_cwd(self) -> str:
        home = self.home_dir.rstrip(os.sep) or os.sep
        if home == os.sep:
            return self.cwd
        if self.cwd == home:
            return "~"
        if self.cwd.startswith(home + os.sep):
            return "~" + self.cwd[len(home):]
        return self.cwd

    def current_prompt(self) -> str:
        """Render the prompt for the current directory; never cached."""
        return self.prompt_template.format(
            username=self.username,
            hostname=self.hostname,
            cwd=self.display_cwd(),
        )

    def resolve(self, path: str) -> str:
        text = str(path or "")
        if text == "~" or text.startswith("~" + os.sep):
            text = self.home_dir + text[1:]
        return os.path.normpath(os.path.join(self.cwd, text))

    def change_directory(self, target: str | None = None) -> str:
        """Move ``cwd`` to ``target`` (home when omitted) and return the new path.

        Raises ``NavigationError`` without touching ``cwd`` when the resolved
        path is not an existing, searchable directory.
        """
        if target is None or not str(target).strip():
            resolved = self.home_dir
            shown = self.home_dir
        else:
            resolved = self.resolve(target)
            shown = str(target)

        if not _is_usable_dir(resolved):
            raise NavigationError(shown)
        self.cwd = resolved
        return self.cwd
