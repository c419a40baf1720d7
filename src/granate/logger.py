"""Package logger: standard logging records rendered by Rich, plus CLI output helpers."""

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


class GranateLogger(logging.Logger):
    """
    Logger shared by the library and the CLI.

    Library modules log with the standard levels. The CLI renders query results,
    annotation listings and the configuration with ``success``, ``rule``,
    ``print_dict`` and ``list_item``.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        super().__init__(name, level)
        self.console = Console()

        handler = RichHandler(console=self.console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)
        # records are rendered once, by the rich handler
        self.propagate = False

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def rule(self, title: str) -> None:
        """Print a horizontal rule titled ``title``."""
        self.console.rule(f"[bold blue]{title}")

    def print_dict(self, data: dict[str, Any]) -> None:
        """
        Print a mapping as highlighted JSON.

        Args:
            data: Mapping to print. Values JSON cannot encode are printed with ``str``.
        """
        self.console.print_json(json.dumps(data, indent=2, default=str))

    def list_item(self, text: str) -> None:
        self.console.print(f"- {text}")


def get_logger(name: str = "granate") -> GranateLogger:
    """Return the granate logger named ``name``, creating it on first use."""
    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(GranateLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous_class)

    return logger  # type: ignore[return-value]
