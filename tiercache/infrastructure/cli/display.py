import logging
from typing import Any, Optional, Sequence, Tuple

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tiercache.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self.console = console or Console()

    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays a cached value inside a panel.

        Args:
            output: The value to display.
            **kwargs: Additional arguments including:
                - title: The panel title (default: "Value")
        """
        title = kwargs.get("title", "Value")
        panel = Panel(
            Text(str(output)),
            title=f"[bold cyan]{title}[/bold cyan]",
            border_style="cyan",
            box=ROUNDED,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style."""
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_entries(self, title: str, rows: Sequence[Tuple[str, str]]) -> None:
        """Displays cache keys and their status as a table.

        Args:
            title: Table title.
            rows: (key, status) pairs, status being e.g. 'valid' or 'expired'.
        """
        table = Table(title=title, box=ROUNDED, show_lines=False)
        table.add_column("Key", style="bold")
        table.add_column("Status")
        for key, status in rows:
            style = "green" if status == "valid" else "yellow"
            table.add_row(key, f"[{style}]{status}[/{style}]")
        self.console.print(table)
        self.console.print(f"[dim]{len(rows)} entries[/dim]")

    def ask_yes_no_question(self, question: str) -> bool:
        """Asks a yes/no question and returns the answer.

        Args:
            question: The question to ask

        Returns:
            True if the answer is yes, False otherwise
        """
        logger.debug(f"Asking yes/no question: {question}")
        panel = Panel(
            Text(f"{question} (y/n)", style="white"),
            title="[bold yellow]Question[/bold yellow]",
            border_style="yellow",
            box=ROUNDED,
            padding=(0, 1)
        )
        self.console.print(panel)
        response = self.console.input("[bold yellow]> [/bold yellow]").strip().lower()
        return response in ('y', 'yes')
