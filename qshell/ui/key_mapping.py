"""Translate Qt key events into prompt-guard actions."""

from __future__ import annotations

from PySide6 import QtCore, QtGui

from qshell.core.prompt_guard import KeyAction

_PLAIN_KEYS: dict[int, KeyAction] = {
    QtCore.Qt.Key_Return: KeyAction.SUBMIT,
    QtCore.Qt.Key_Enter: KeyAction.SUBMIT,
    QtCore.Qt.Key_Backspace: KeyAction.BACKSPACE,
    QtCore.Qt.Key_Delete: KeyAction.DELETE,
    QtCore.Qt.Key_Left: KeyAction.LEFT,
    QtCore.Qt.Key_Right: KeyAction.RIGHT,
    QtCore.Qt.Key_Up: KeyAction.UP,
    QtCore.Qt.Key_Down: KeyAction.DOWN,
    QtCore.Qt.Key_Home: KeyAction.HOME,
    QtCore.Qt.Key_End: KeyAction.END,
}

_STANDARD_KEYS: tuple[tuple[QtGui.QKeySequence.StandardKey, KeyAction], ...] = (
    (QtGui.QKeySequence.Cut, KeyAction.CUT),
    (QtGui.QKeySequence.Copy, KeyAction.COPY),
    (QtGui.QKeySequence.Paste, KeyAction.PASTE),
    (QtGui.QKeySequence.SelectAll, KeyAction.SELECT_ALL),
)


def key_action_for_event(e: QtGui.QKeyEvent) -> tuple[KeyAction, str] | None:
    """Return the guard action for ``e`` plus the text it carries, if any."""
    key, mods = e.key(), e.modifiers()

    # Clear screen (Ctrl+L)
    if key == QtCore.Qt.Key_L and (mods & QtCore.Qt.ControlModifier):
        return KeyAction.CLEAR_SCREEN, ""

    for sequence, action in _STANDARD_KEYS:
        if e.matches(sequence):
            return action, ""

    action = _PLAIN_KEYS.get(key)
    if action is not None:
        return action, ""

    text = e.text()
    if text and text.isprintable():
        return KeyAction.TEXT, text
    return None
