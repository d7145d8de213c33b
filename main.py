import sys

from loguru import logger
from PySide6.QtWidgets import QApplication

from qshell.logging_utils import configure_logging
from qshell.settings_models import default_settings, default_settings_path
from qshell.settings_store import JsonSettingsStore
from qshell.ui.terminal_window import TerminalWindow


def _load_startup_settings() -> JsonSettingsStore:
    store = JsonSettingsStore(default_settings_path(), default_settings())
    store.load()
    if store.last_error:
        logger.warning("startup.settings_invalid path={} error={}", store.path, store.last_error)
    return store


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = list(sys.argv if argv is None else argv)
    settings = _load_startup_settings()

    app = QApplication(args)
    app.setStyle("Fusion")
    app.setApplicationName(str(settings.get("window.title", default="QShell")))
    window = TerminalWindow(settings)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
