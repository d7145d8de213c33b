from .key_mapping import key_action_for_event
from .terminal_window import TerminalWindow

__all__ = [
    "TerminalWindow",
    "key_action_for_event",
]
