"""Console rendering for component debug callbacks."""

from datetime import datetime

from rich.console import Console
from rich.markup import escape

from ..config import LogLevel

LEVEL_COLORS = {
    LogLevel.DEBUG: "dim white",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}

COMPONENT_COLORS = {
    "task": "green",
    "executor": "bright_yellow",
    "llm": "magenta",
    "git": "blue",
    "login": "bright_cyan",
    "credentials": "bright_green",
}


class ConsoleLog:
    """Callable passed as ``debug_callback`` that prints to a Rich console.

    Entries below the level threshold are dropped.
    """

    def __init__(self, console: Console, log_level: int = LogLevel.INFO):
        self._console = console
        self.log_level = log_level

    def __call__(self, level: str, component: str, message: str) -> None:
        self.log(component, message, LogLevel.from_string(level))

    def log(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Print a log entry if it meets the current level threshold.

        Args:
            component: Component name (task, executor, llm, git, etc.)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self.log_level:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        level_color = LEVEL_COLORS.get(level, "white")
        comp_color = COMPONENT_COLORS.get(component, "white")

        self._console.print(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )
