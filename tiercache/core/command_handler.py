"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), opens the named
cache through an injected factory and reports the outcome on the user
interface. Every handler returns True on success so the entry point can
set the exit code.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

# Domain Layer Imports
from tiercache.domain.interfaces.cache import CacheService
from tiercache.domain.interfaces.user_interface import UserInterface
from tiercache.domain.models.common import CacheKey
from tiercache.domain.models.errors import CacheError
from tiercache.domain.models.expiration import Expiration

logger = logging.getLogger(__name__)

CacheFactory = Callable[[str, Optional[Path]], CacheService]
PurgeFunction = Callable[[Optional[Path]], bool]


class CommandHandler:
    """Handles maintenance commands and delegates to the cache."""

    def __init__(self, cache_factory: CacheFactory, purge: PurgeFunction, ui: UserInterface):
        """Initializes the CommandHandler.

        Args:
            cache_factory: Opens a cache given its name and optional directory.
            purge: Deletes a cache root (None for the default root).
            ui: Where results and errors are displayed.
        """
        self.cache_factory = cache_factory
        self.purge = purge
        self.ui = ui

    def _open(self, name: str, directory: Optional[Path]) -> Optional[CacheService]:
        try:
            return self.cache_factory(name, directory)
        except CacheError as e:
            logger.error(f"Failed to open cache '{name}': {e}")
            self.ui.display_error(f"Cannot open cache '{name}': {e}")
            return None

    def handle_keys(self, name: str, directory: Optional[Path] = None) -> bool:
        """Handles the 'keys' command."""
        cache = self._open(name, directory)
        if cache is None:
            return False

        rows = []
        for key in cache.all_keys():
            if cache.get(key) is not None:
                status = "valid"
            elif cache.get(key, allow_expired=True) is not None:
                status = "expired"
            else:
                status = "unreadable"
            rows.append((key, status))
        self.ui.display_entries(name, rows)
        return True

    def handle_show(self, name: str, key: str, allow_expired: bool = False, directory: Optional[Path] = None) -> bool:
        """Handles the 'show' command."""
        cache = self._open(name, directory)
        if cache is None:
            return False

        value = cache.get(CacheKey(key), allow_expired=allow_expired)
        if value is None:
            self.ui.display_warning(f"No value for '{key}' in cache '{name}'.")
            return False
        self.ui.display_output(str(value), title=key)
        return True

    def handle_put(
        self,
        name: str,
        key: str,
        value: str,
        ttl: Optional[float] = None,
        directory: Optional[Path] = None,
    ) -> bool:
        """Handles the 'put' command."""
        cache = self._open(name, directory)
        if cache is None:
            return False

        expiration = Expiration.seconds(ttl) if ttl is not None else Expiration.never()
        try:
            cache.set(CacheKey(key), value, expiration)
        except CacheError as e:
            logger.error(f"Failed to store '{key}' in cache '{name}': {e}")
            self.ui.display_error(f"Failed to store '{key}': {e}")
            return False
        self.ui.display_info(f"Stored '{key}' in cache '{name}'.")
        return True

    def handle_remove(self, name: str, key: str, directory: Optional[Path] = None) -> bool:
        """Handles the 'remove' command."""
        cache = self._open(name, directory)
        if cache is None:
            return False
        cache.remove(CacheKey(key))
        self.ui.display_info(f"Removed '{key}' from cache '{name}'.")
        return True

    def handle_sweep(self, name: str, directory: Optional[Path] = None) -> bool:
        """Handles the 'sweep' command (remove expired entries)."""
        cache = self._open(name, directory)
        if cache is None:
            return False
        removed = cache.remove_expired()
        self.ui.display_info(f"Removed {removed} expired entries from cache '{name}'.")
        return True

    def handle_clear(self, name: str, directory: Optional[Path] = None) -> bool:
        """Handles the 'clear' command."""
        cache = self._open(name, directory)
        if cache is None:
            return False
        cache.remove_all()
        self.ui.display_info(f"Cache '{name}' cleared.")
        return True

    def handle_purge(self, root: Optional[Path] = None, assume_yes: bool = False) -> bool:
        """Handles the 'purge' command, which deletes every cache under the root."""
        target = str(root) if root is not None else "the default cache root"
        if not assume_yes and not self.ui.ask_yes_no_question(f"Delete every cache under {target}?"):
            self.ui.display_info("Purge cancelled.")
            return True

        if not self.purge(root):
            self.ui.display_error(f"Failed to purge {target}. See the log for details.")
            return False
        self.ui.display_info(f"Purged {target}.")
        return True
