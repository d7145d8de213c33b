"""Command and output event types shared by the dispatch engine and the UI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputKind(Enum):
    NORMAL = "normal"
    ERROR = "error"
    PROMPT = "prompt"
    EXIT = "exit"


@dataclass(frozen=True, slots=True)
class OutputEvent:
    text: str
    kind: OutputKind = OutputKind.NORMAL

    @staticmethod
    def line(text: str, kind: OutputKind = OutputKind.NORMAL) -> "OutputEvent":
        value = str(text or "")
        if not value.endswith("\n"):
            value += "\n"
        return OutputEvent(value, kind)

    @staticmethod
    def error(text: str) -> "OutputEvent":
        return OutputEvent.line(text, OutputKind.ERROR)

    @staticmethod
    def blank() -> "OutputEvent":
        return OutputEvent("", OutputKind.NORMAL)

    @staticmethod
    def prompt() -> "OutputEvent":
        return OutputEvent("", OutputKind.PROMPT)

    @staticmethod
    def exit() -> "OutputEvent":
        return OutputEvent("", OutputKind.EXIT)


@dataclass(frozen=True, slots=True)
class Command:
    program: str
    args: tuple[str, ...] = field(default_factory=tuple)


def tokenize(raw_line: str) -> Command | None:
    """Split a raw line on whitespace runs; ``None`` when nothing is left."""
    tokens = str(raw_line or "").split()
    if not tokens:
        return None
    return Command(program=tokens[0], args=tuple(tokens[1:]))
