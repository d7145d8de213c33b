from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Any, TypedDict

from .core.session import DEFAULT_PROMPT_TEMPLATE

SETTINGS_DIR_ENV = "QSHELL_SETTINGS_DIR"
SETTINGS_DIRNAME = ".qshell"
SETTINGS_FILENAME = "settings.json"


class ShellSettings(TypedDict, total=False):
    prompt_template: str
    start_directory: str


class TerminalSettings(TypedDict, total=False):
    prompt_delay_ms: int
    font_family: str
    font_size: int
    cursor_width: int


class WindowSettings(TypedDict, total=False):
    title: str
    width: int
    height: int


class QShellSettings(TypedDict, total=False):
    shell: ShellSettings
    terminal: TerminalSettings
    window: WindowSettings


_DEFAULT_SETTINGS: QShellSettings = {
    "shell": {
        "prompt_template": DEFAULT_PROMPT_TEMPLATE,
        "start_directory": "",
    },
    "terminal": {
        "prompt_delay_ms": 15,
        "font_family": "monospace",
        "font_size": 11,
        "cursor_width": 8,
    },
    "window": {
        "title": "QShell",
        "width": 800,
        "height": 600,
    },
}


def default_settings() -> dict[str, Any]:
    return deepcopy(dict(_DEFAULT_SETTINGS))


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_DIR_ENV, "").strip()
    base = Path(override).expanduser() if override else Path.home() / SETTINGS_DIRNAME
    return base / SETTINGS_FILENAME
