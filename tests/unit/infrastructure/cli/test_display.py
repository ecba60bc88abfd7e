import pytest
from unittest.mock import MagicMock

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tiercache.infrastructure.cli.display import ConsoleDisplay

@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()

@pytest.fixture
def console_display(mock_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with a mocked console."""
    return ConsoleDisplay(console=mock_console)

def test_display_output_uses_a_panel(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_output("chocolate", title="flavor")
    mock_console.print.assert_called_once()
    args, _ = mock_console.print.call_args
    assert isinstance(args[0], Panel)
    assert "flavor" in args[0].title

def test_display_error(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_error("Something went wrong")
    args, _ = mock_console.print.call_args
    assert isinstance(args[0], Panel)
    assert "Error" in args[0].title

def test_display_entries_renders_a_table(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_entries("Cache 'flavors'", [("Vanilla", "valid"), ("Mint", "expired")])

    table = mock_console.print.call_args_list[0].args[0]
    assert isinstance(table, Table)
    assert table.row_count == 2
    mock_console.print.assert_called_with("[dim]2 entries[/dim]")

def test_display_entries_output_text():
    """Renders through a real console to check the visible text."""
    console = Console(record=True, width=80)
    ConsoleDisplay(console=console).display_entries("Cache 'flavors'", [("Vanilla", "valid")])
    text = console.export_text()
    assert "Vanilla" in text
    assert "valid" in text
    assert "1 entries" in text

@pytest.mark.parametrize("answer, expected", [("y", True), ("YES ", True), ("n", False), ("", False)])
def test_ask_yes_no_question(console_display: ConsoleDisplay, mock_console: MagicMock, answer, expected):
    mock_console.input.return_value = answer
    assert console_display.ask_yes_no_question("Delete everything?") is expected
    mock_console.input.assert_called_once()
