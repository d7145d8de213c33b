from __future__ import annotations

import json
from pathlib import Path

import pytest

from qshell.settings_models import SETTINGS_DIR_ENV, default_settings, default_settings_path
from qshell.settings_store import JsonSettingsStore, dot_get, dot_set


def test_missing_file_loads_defaults(tmp_path: Path) -> None:
    store = JsonSettingsStore(tmp_path / "settings.json", default_settings())
    store.load()
    assert store.get("terminal.prompt_delay_ms") == 15
    assert store.get("shell.prompt_template") == "{username}@{hostname}:{cwd}$ "
    assert store.dirty


def test_file_values_override_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"terminal": {"font_size": 14}}), encoding="utf-8")
    store = JsonSettingsStore(path, default_settings())
    store.load()
    assert store.get("terminal.font_size") == 14
    assert store.get("terminal.font_family") == "monospace"
    assert not store.dirty


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]"])
def test_invalid_file_keeps_defaults_and_records_error(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(payload, encoding="utf-8")
    store = JsonSettingsStore(path, default_settings())
    store.load()
    assert store.last_error
    assert store.get("window.title") == "QShell"
    assert path.read_text(encoding="utf-8") == payload


def test_set_save_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    store = JsonSettingsStore(path, default_settings())
    store.load()
    assert store.set("shell.start_directory", "/srv")
    assert not store.set("shell.start_directory", "/srv")
    store.save()
    assert not store.dirty

    reloaded = JsonSettingsStore(path, default_settings())
    reloaded.load()
    assert reloaded.get("shell.start_directory") == "/srv"


def test_dot_helpers() -> None:
    data: dict = {}
    dot_set(data, "a.b.c", 1)
    assert dot_get(data, "a.b.c") == 1
    assert dot_get(data, "a.x", "fallback") == "fallback"
    dot_set(data, "a.b", 2)
    assert data == {"a": {"b": 2}}


def test_settings_dir_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(SETTINGS_DIR_ENV, str(tmp_path))
    assert default_settings_path() == tmp_path / "settings.json"
