#
# A singleton environment for capturing global rendering and logging options.
#
# This controls how expressions are rendered as text and LaTeX when no
# explicit option is passed, and where diagnostic logging goes. It is
# process-wide and not thread safe; set it up once before use.
#
from __future__ import annotations

import logging
import os

from dataclasses  import dataclass, field

from rich.console import Console
from rich.logging import RichHandler
from rich.theme   import Theme

bright_theme = Theme({
    "repr.number": "#3333cc",
    "repr.str": "#330066",
    "logging.level.debug": "#666666",
    "logging.level.warning": "#cc6600",
    "markdown.code": "bold red on #cccccc",
})

dark_theme = Theme({
    "repr.number": "#cccc33",
    "repr.str": "#ccff99",
    "logging.level.debug": "#aaaaaa",
    "logging.level.warning": "#ffcc66",
    "markdown.code": "bold magenta on white",
})

LOGGER_NAME = 'symkernel'
DEFAULT_LOG_LEVEL = os.environ.get('SYMKERNEL_LOG_LEVEL', 'WARNING').upper()


@dataclass
class Environment:
    """Options governing rendering and diagnostics, globally available.
    """
    ascii_only: bool = False
    dark_mode: bool = False
    implicit_multiplication: bool = False
    tex_multiplication: str = 'cdot'
    log_level: str | int = DEFAULT_LOG_LEVEL
    console: Console = field(default_factory=lambda: Console(highlight=True, theme=bright_theme))

    def on_ascii_only(self) -> None:
        "Require ASCII-only output, no rich text or panels."
        self.ascii_only = True

    def off_ascii_only(self) -> None:
        "Allow non-ascii and rich output"
        self.ascii_only = False

    def on_dark_mode(self) -> None:
        "Changes text color to suit dark colored terminals"
        self.dark_mode = True
        self.console.push_theme(dark_theme)

    def on_bright_mode(self) -> None:
        "Text color default suited for light colored terminals"
        self.dark_mode = False
        self.console.push_theme(bright_theme)

    def on_implicit_multiplication(self) -> None:
        "Render products by juxtaposition, e.g., 3x^2 rather than 3*x^2."
        self.implicit_multiplication = True

    def off_implicit_multiplication(self) -> None:
        "Render products with an explicit *."
        self.implicit_multiplication = False

    def set_tex_multiplication(self, command: str) -> None:
        "Sets the LaTeX command (without backslash) used between factors, e.g., cdot or times."
        self.tex_multiplication = command.lstrip('\\')

    def enable_logging(self, level: str | int | None = None) -> logging.Logger:
        """Routes the package's log records to this environment's console.

        Returns the package logger. Calling this again only adjusts the level.

        """
        if level is not None:
            self.log_level = level if isinstance(level, int) else level.upper()

        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(self.log_level)
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            logger.addHandler(RichHandler(console=self.console, show_path=False))
        return logger

    def console_str(self, rich_str) -> str:
        with self.console.capture() as capture:
            self.console.print(rich_str)
        return capture.get()

environment = Environment()

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())
