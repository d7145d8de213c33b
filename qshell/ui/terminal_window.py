"""Main window: a single plain-text surface driven by the prompt guard."""

from __future__ import annotations

from loguru import logger
from PySide6 import QtCore, QtGui, QtWidgets

from qshell.core.events import OutputEvent, OutputKind
from qshell.core.prompt_guard import KeyAction, PromptGuard
from qshell.core.router import CommandRouter
from qshell.core.session import Session
from qshell.settings_store import JsonSettingsStore, SettingsStoreError
from qshell.ui.key_mapping import key_action_for_event


def _utf16_offset(text: str, index: int) -> int:
    """Qt document position of code-point `index` in `text`."""
    return len(text[:index].encode("utf-16-le")) // 2


def _code_point_offset(text: str, units: int) -> int:
    """Inverse of `_utf16_offset`; a position inside a surrogate pair rounds up."""
    consumed = 0
    for index, char in enumerate(text):
        if consumed >= units:
            return index
        consumed += 2 if ord(char) > 0xFFFF else 1
    return len(text)


class TerminalWindow(QtWidgets.QMainWindow):
    """Renders guard content and forwards key presses; holds no shell logic."""

    def __init__(
        self,
        settings: JsonSettingsStore,
        *,
        session: Session | None = None,
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        self.settings = settings
        self.session = session or Session.from_environment(
            start_dir=settings.get("shell.start_directory", default=""),
            prompt_template=settings.get("shell.prompt_template", default=""),
        )
        self.guard = PromptGuard()
        self.router = CommandRouter(self.session, parent=self)
        self.router.eventEmitted.connect(self._on_router_event)
        self.router.exitRequested.connect(self.close)

        self._prompt_delay_ms = max(0, int(settings.get("terminal.prompt_delay_ms", default=15) or 0))
        self._prompt_timer = QtCore.QTimer(self)
        self._prompt_timer.setSingleShot(True)
        self._prompt_timer.timeout.connect(self.display_shell_prompt)

        self._setup_ui()
        self.display_shell_prompt()

    def _setup_ui(self) -> None:
        self.setWindowTitle(str(self.settings.get("window.title", default="QShell")))
        self.resize(
            int(self.settings.get("window.width", default=800)),
            int(self.settings.get("window.height", default=600)),
        )

        central = QtWidgets.QWidget(self)
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)

        self.terminal_area = QtWidgets.QPlainTextEdit(central)
        self.terminal_area.setObjectName("defaultTerminal")
        self.terminal_area.setUndoRedoEnabled(False)
        self.terminal_area.setCursorWidth(int(self.settings.get("terminal.cursor_width", default=8)))
        font = QtGui.QFont(str(self.settings.get("terminal.font_family", default="monospace")))
        font.setStyleHint(QtGui.QFont.Monospace)
        font.setPointSize(int(self.settings.get("terminal.font_size", default=11)))
        self.terminal_area.setFont(font)
        # Key presses go through eventFilter so the guard sees them first.
        self.terminal_area.installEventFilter(self)

        layout.addWidget(self.terminal_area)
        self.setCentralWidget(central)

    # -------- Rendering --------
    def display_shell_prompt(self) -> None:
        self.guard.display_prompt(self.session.current_prompt())
        self._render()

    def clear_screen(self) -> None:
        self._prompt_timer.stop()
        self.terminal_area.clear()
        self.guard.clear_screen(self.session.current_prompt())
        self._render()
        self.terminal_area.verticalScrollBar().setValue(0)

    def _render(self) -> None:
        doc_text = self.terminal_area.toPlainText()
        content = self.guard.content
        if doc_text != content:
            if content.startswith(doc_text):
                tail = QtGui.QTextCursor(self.terminal_area.document())
                tail.movePosition(QtGui.QTextCursor.End)
                tail.insertText(content[len(doc_text):])
            else:
                self.terminal_area.setPlainText(content)

        cursor = self.terminal_area.textCursor()
        position = _utf16_offset(content, self.guard.cursor)
        if self.guard.has_selection() and self.guard.anchor is not None:
            cursor.setPosition(_utf16_offset(content, self.guard.anchor))
            cursor.setPosition(position, QtGui.QTextCursor.KeepAnchor)
        else:
            cursor.setPosition(position)
        self.terminal_area.setTextCursor(cursor)
        self.terminal_area.ensureCursorVisible()

    def _sync_cursor_from_view(self) -> None:
        cursor = self.terminal_area.textCursor()
        content = self.guard.content
        anchor = _code_point_offset(content, cursor.anchor()) if cursor.hasSelection() else None
        self.guard.set_cursor(_code_point_offset(content, cursor.position()), anchor)

    # -------- Events --------
    def eventFilter(self, watched: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if watched is self.terminal_area and event.type() == QtCore.QEvent.KeyPress:
            self._handle_key(event)
            return True
        return super().eventFilter(watched, event)

    def _handle_key(self, event: QtGui.QKeyEvent) -> None:
        mapped = key_action_for_event(event)
        if mapped is None:
            return
        action, text = mapped
        self._sync_cursor_from_view()

        clipboard = QtWidgets.QApplication.clipboard()
        if action is KeyAction.PASTE:
            text = clipboard.text() if clipboard is not None else ""
        elif action is KeyAction.COPY and clipboard is not None and self.guard.has_selection():
            clipboard.setText(self.guard.selected_text())

        result = self.guard.handle_key(action, text)
        if result.clear_screen:
            self.clear_screen()
            return
        self._render()
        if result.command is not None:
            self._submit(result.command)

    def _submit(self, command: str) -> None:
        try:
            self.router.dispatch(command)
        except Exception as exc:
            logger.exception("window.submit.error command={}", command)
            self._on_router_event(OutputEvent.error(f"Error: {exc}"))
            self._on_router_event(OutputEvent.prompt())

    def _on_router_event(self, event: OutputEvent) -> None:
        if event.kind is OutputKind.PROMPT:
            self._prompt_timer.start(self._prompt_delay_ms)
            return
        if event.kind is OutputKind.EXIT:
            return
        if event.text:
            self.guard.append_output(event.text)
            self._render()

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._prompt_timer.stop()
        self.settings.set("window.width", self.width())
        self.settings.set("window.height", self.height())
        if self.settings.dirty:
            try:
                self.settings.save()
            except SettingsStoreError as exc:
                logger.warning("window.settings_save_failed error={}", exc)
        super().closeEvent(event)
