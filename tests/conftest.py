from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication, QEventLoop  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from qshell.core.session import Session  # noqa: E402


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def wait_until(predicate: Callable[[], bool], timeout: float = 10.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents(QEventLoop.AllEvents, 50)
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    home = tmp_path / "home" / "alice"
    home.mkdir(parents=True)
    return home


@pytest.fixture
def session(home_dir: Path) -> Session:
    return Session(username="alice", hostname="box", home_dir=str(home_dir), cwd=str(home_dir))
