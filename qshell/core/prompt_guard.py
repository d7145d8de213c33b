"""Line-edit state machine behind the terminal text surface.

The guard owns the plain-text content of the terminal, the cursor, the
selection anchor and the prompt boundary. Nothing before the boundary can be
deleted, overwritten or cut; the boundary moves only when a prompt is shown
or the screen is cleared.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class KeyAction(Enum):
    TEXT = auto()
    BACKSPACE = auto()
    DELETE = auto()
    LEFT = auto()
    RIGHT = auto()
    UP = auto()
    DOWN = auto()
    HOME = auto()
    END = auto()
    CUT = auto()
    COPY = auto()
    PASTE = auto()
    SELECT_ALL = auto()
    CLEAR_SCREEN = auto()
    SUBMIT = auto()


class GuardState(Enum):
    AWAITING_INPUT = auto()
    SUBMITTING = auto()


@dataclass(frozen=True, slots=True)
class KeyResult:
    accepted: bool
    command: str | None = None
    clear_screen: bool = False


SUPPRESSED = KeyResult(False)
ACCEPTED = KeyResult(True)


class PromptGuard:
    def __init__(self) -> None:
        self.content = ""
        self.cursor = 0
        self.anchor: int | None = None
        self.prompt_boundary = 0
        self.prompt_text = ""
        self.is_first_prompt = True
        self.state = GuardState.AWAITING_INPUT

    # -------- Selection helpers --------
    def has_selection(self) -> bool:
        return self.anchor is not None and self.anchor != self.cursor

    def selection_range(self) -> tuple[int, int]:
        if self.anchor is None:
            return self.cursor, self.cursor
        return min(self.anchor, self.cursor), max(self.anchor, self.cursor)

    def selected_text(self) -> str:
        start, end = self.selection_range()
        return self.content[start:end]

    def set_cursor(self, position: int, anchor: int | None = None) -> None:
        """Mirror a cursor/selection the view changed itself (mouse clicks)."""
        size = len(self.content)
        self.cursor = max(0, min(int(position), size))
        if anchor is None or int(anchor) == self.cursor:
            self.anchor = None
        else:
            self.anchor = max(0, min(int(anchor), size))

    def current_input(self) -> str:
        return self.content[self.prompt_boundary:]

    def _selection_is_guarded(self) -> bool:
        start, end = self.selection_range()
        return start < self.prompt_boundary or end < self.prompt_boundary

    # -------- Rendering --------
    def display_prompt(self, prompt: str) -> bool:
        """Show ``prompt`` on a fresh line; returns False when it was a duplicate."""
        last_line = self.content.split("\n")[-1].strip()
        if last_line == prompt.strip() and not self.is_first_prompt:
            self.state = GuardState.AWAITING_INPUT
            return False

        if not self.is_first_prompt and self.content and not self.content.endswith("\n"):
            self.content += "\n"
        self.content += prompt
        self.cursor = len(self.content)
        self.anchor = None
        self.prompt_text = prompt
        self.prompt_boundary = self.cursor
        self.is_first_prompt = False
        self.state = GuardState.AWAITING_INPUT
        return True

    def append_output(self, text: str) -> None:
        if not text:
            return
        self.content += text
        self.cursor = len(self.content)
        self.anchor = None

    def clear_screen(self, prompt: str) -> None:
        self.content = ""
        self.cursor = 0
        self.anchor = None
        self.prompt_boundary = 0
        self.is_first_prompt = True
        self.display_prompt(prompt)

    # -------- Editing --------
    def _replace_selection(self, text: str) -> None:
        start, end = self.selection_range()
        self.content = self.content[:start] + text + self.content[end:]
        self.cursor = start + len(text)
        self.anchor = None

    def insert_text(self, text: str) -> bool:
        if not text:
            return False
        if self.has_selection():
            if self._selection_is_guarded():
                return False
            self._replace_selection(text)
            return True
        if self.cursor < self.prompt_boundary:
            return False
        self.anchor = None
        self._replace_selection(text)
        return True

    def backspace(self) -> bool:
        if self.has_selection():
            if self._selection_is_guarded():
                return False
            self._replace_selection("")
            return True
        if self.cursor <= self.prompt_boundary:
            return False
        self.content = self.content[: self.cursor - 1] + self.content[self.cursor:]
        self.cursor -= 1
        self.anchor = None
        return True

    def delete_forward(self) -> bool:
        if self.has_selection():
            if self._selection_is_guarded():
                return False
            self._replace_selection("")
            return True
        if self.cursor < self.prompt_boundary or self.cursor >= len(self.content):
            return False
        self.content = self.content[: self.cursor] + self.content[self.cursor + 1:]
        self.anchor = None
        return True

    def paste(self, text: str) -> bool:
        if self.cursor < self.prompt_boundary:
            return False
        return self.insert_text(text)

    def move_left(self) -> bool:
        if self.cursor <= self.prompt_boundary:
            return False
        self.cursor -= 1
        self.anchor = None
        return True

    def move_right(self) -> bool:
        if self.cursor >= len(self.content):
            return False
        self.cursor += 1
        self.anchor = None
        return True

    def submit(self) -> str | None:
        """Extract the typed command, or ``None`` when the prompt region is gone."""
        self.state = GuardState.SUBMITTING
        self.anchor = None
        boundary = self.prompt_boundary
        start = boundary - len(self.prompt_text)
        if not self.prompt_text or start < 0 or self.content[start:boundary] != self.prompt_text:
            self.state = GuardState.AWAITING_INPUT
            return None

        command = self.content[boundary:].strip()
        self.content += "\n"
        self.cursor = len(self.content)
        return command

    def handle_key(self, action: KeyAction, text: str = "") -> KeyResult:
        if self.state is GuardState.SUBMITTING and action is not KeyAction.CLEAR_SCREEN:
            if action is KeyAction.COPY:
                return ACCEPTED
            return SUPPRESSED

        if action is KeyAction.SUBMIT:
            command = self.submit()
            if command is None:
                return SUPPRESSED
            return KeyResult(True, command=command)
        if action is KeyAction.CLEAR_SCREEN:
            return KeyResult(True, clear_screen=True)
        if action in (KeyAction.UP, KeyAction.DOWN, KeyAction.CUT):
            return SUPPRESSED
        if action is KeyAction.COPY:
            return ACCEPTED
        if action is KeyAction.SELECT_ALL:
            self.anchor = self.prompt_boundary
            self.cursor = len(self.content)
            return ACCEPTED
        if action is KeyAction.HOME:
            self.cursor = self.prompt_boundary
            self.anchor = None
            return ACCEPTED
        if action is KeyAction.END:
            self.cursor = len(self.content)
            self.anchor = None
            return ACCEPTED

        handlers = {
            KeyAction.LEFT: self.move_left,
            KeyAction.RIGHT: self.move_right,
            KeyAction.BACKSPACE: self.backspace,
            KeyAction.DELETE: self.delete_forward,
        }
        handler = handlers.get(action)
        if handler is not None:
            return ACCEPTED if handler() else SUPPRESSED
        if action is KeyAction.PASTE:
            return ACCEPTED if self.paste(text) else SUPPRESSED
        if action is KeyAction.TEXT:
            return ACCEPTED if self.insert_text(text) else SUPPRESSED
        return SUPPRESSED
