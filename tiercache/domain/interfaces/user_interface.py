"""Interface for interacting with the user (input/output).

Defines the contract for displaying cache contents, errors and
informational messages, and for confirming destructive actions, allowing
different UI implementations.
"""

import abc
from typing import Any, Sequence, Tuple


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays a value to the user.

        Args:
            output: The text to display.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_entries(self, title: str, rows: Sequence[Tuple[str, str]]) -> None:
        """Displays a table of cache entries.

        Args:
            title: Table caption (usually the cache name).
            rows: (key, status) pairs.
        """
        pass

    @abc.abstractmethod
    def ask_yes_no_question(self, question: str) -> bool:
        """Asks a yes/no question and returns True for yes."""
        pass
