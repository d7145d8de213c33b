"""QShell: a Qt terminal window with a line-editing shell core."""

__version__ = "0.1.0"
