"""Cache root resolution and the process-wide purge utility.

Every cache instance without an explicit directory lives under
``<platform cache dir>/tiercache/<name>``. ``purge_cache`` deletes that whole
namespace, independently of any live instance.
"""

import logging
import os
import platform
from pathlib import Path
from typing import Optional

from tiercache.domain.events.cache_events import DiagnosticsHook, PurgeFailed, publish
from tiercache.domain.interfaces.filesystem import FileSystem
from tiercache.infrastructure.config.settings import get_cache_root
from tiercache.infrastructure.filesystem.local_fs import LocalFileSystem

logger = logging.getLogger(__name__)

NAMESPACE = "tiercache"


def platform_cache_dir() -> Path:
    """Returns the per-user cache directory of the running platform."""
    system = platform.system()
    if system == "Darwin":
        return Path.home() / "Library" / "Caches"
    if system == "Windows":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data)
        return Path.home() / "AppData" / "Local"
    xdg_cache_home = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache_home:
        return Path(xdg_cache_home)
    return Path.home() / ".cache"


def cache_root() -> Path:
    """Returns the namespace directory holding every default-located cache.

    A root configured through ``TIERCACHE_ROOT`` or ``cache.root`` is used as
    is; otherwise the namespace lives in the platform cache directory.
    """
    configured = get_cache_root()
    if configured is not None:
        return configured
    return platform_cache_dir() / NAMESPACE


def purge_cache(
    root: Optional[Path] = None,
    file_system: Optional[FileSystem] = None,
    diagnostics: Optional[DiagnosticsHook] = None,
) -> bool:
    """Deletes the shared cache root and every cache stored below it.

    Best-effort: failures are logged and reported, never raised. Live
    instances are not notified; their memory tiers keep whatever they hold.

    Args:
        root: The namespace root to delete. Defaults to ``cache_root()``.
        file_system: File system adapter. Defaults to the local disk.
        diagnostics: Receives a ``PurgeFailed`` event on failure.

    Returns:
        True if the root is gone afterwards, False otherwise.
    """
    root = Path(root) if root is not None else cache_root()
    file_system = file_system or LocalFileSystem()
    try:
        file_system.remove_tree(root)
        logger.info(f"Purged cache root: {root}")
    except FileNotFoundError:
        logger.debug(f"Cache root does not exist, nothing to purge: {root}")
    except OSError as e:
        logger.error(f"Failed to purge cache root {root}: {e}")
        publish(diagnostics, PurgeFailed(root=str(root), error_message=str(e)))
        return False
    return True
