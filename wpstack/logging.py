"""
Logging for wpstack.

Example:
    from wpstack.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Waiting for database")
    logger.warning("Could not chmod scripts/deploy.sh")
    logger.error("Installation failed", exc_info=True)
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

STACK_THEME = Theme({
    "log.time": "dim cyan",
    "log.level.debug": "dim blue",
    "log.level.info": "green",
    "log.level.warning": "yellow",
    "log.level.error": "bold red",
    "log.level.critical": "bold white on red",
    "stack.success": "bold green",
    "stack.failure": "bold red",
    "stack.notice": "cyan",
    "stack.step": "bold",
    "stack.action.create": "green",
    "stack.action.update": "yellow",
    "stack.action.skip": "dim",
})

# Global console instance
console = Console(theme=STACK_THEME, stderr=True)

_initialized = False


def setup_logging(
    level: str = "INFO",
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
    force: bool = False,
) -> None:
    """
    init wpstack's logging

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Show timestamps in log output
        show_path: Show file path in log output
        rich_tracebacks: Use rich formatting for tracebacks
        force: Reconfigure even if logging was already set up

    Note:
        Subsequent calls are ignored unless force is set, to prevent
        duplicate handlers.
    """
    global _initialized

    if _initialized and not force:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        # records carry paths and exception text; styled lines go through StackLogger
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(
        level=numeric_level,
        handlers=[handler],
        force=True,
    )

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a given module.

    Args:
        name: Logger name (typically __name__)
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


class StackLogger:
    """
    wpstack-specific logger

    Wraps the standard logger with the status lines every setup command prints.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.console = console

    def debug(self, message: str, *args, **kwargs) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self.logger.error(message, *args, **kwargs)

    def success(self, message: str) -> None:
        """Print a success line."""
        self.console.print(f"[stack.success]✓[/stack.success] {escape(message)}")

    def failure(self, message: str) -> None:
        """Print a failure line."""
        self.console.print(f"[stack.failure]✗[/stack.failure] {escape(message)}")

    def notice(self, message: str) -> None:
        """Print an informational line that is neither success nor failure."""
        self.console.print(f"[stack.notice]i[/stack.notice] {escape(message)}")

    def step(self, message: str) -> None:
        """Print the heading of a sequence step."""
        self.console.print(f"[stack.step]→ {escape(message)}[/stack.step]")

    def action(self, action: str, target: str, details: Optional[str] = None) -> None:
        """
        Log a filesystem action (create/update/skip).

        Args:
            action: Action type
            target: Path or resource identifier
            details: Optional details about the action
        """
        symbols = {
            "create": "+",
            "update": "~",
            "skip": "=",
        }
        symbol = symbols.get(action.lower(), "•")
        style = f"stack.action.{action.lower()}"

        msg = f"[{style}]{symbol}[/{style}] {escape(target)}"
        if details:
            msg += f" [dim]({escape(details)})[/dim]"

        self.console.print(msg)

    def rule(self, title: str = "") -> None:
        """Print a horizontal separator, optionally titled."""
        self.console.rule(escape(title))

    def line(self, text: str = "") -> None:
        """Print a plain line."""
        self.console.print(escape(text))


def get_stack_logger(name: str) -> StackLogger:
    """
    Get a StackLogger instance for the given module.

    Example:
        logger = get_stack_logger(__name__)
        logger.success("WordPress salts updated in .env file")
        logger.action("create", "web/app/uploads")
    """
    return StackLogger(name)
