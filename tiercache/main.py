"""Main entry point for the tiercache maintenance CLI.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
Caches opened from the CLI hold UTF-8 text values.
"""

import logging
from functools import partial
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from tiercache.core.command_handler import CommandHandler

# --- Infrastructure Layer ---
# Cache
from tiercache.infrastructure.cache.codecs import TextCodec
from tiercache.infrastructure.cache.purge import purge_cache
from tiercache.infrastructure.cache.tiered_cache import TieredCache
# Config
from tiercache.infrastructure.config.settings import (
    get_background_writes,
    get_config,
    get_memory_max_items,
    get_protection,
    load_configuration,
)
# FileSystem
from tiercache.infrastructure.filesystem.local_fs import LocalFileSystem
# UI
from tiercache.infrastructure.cli.display import ConsoleDisplay
# Monitoring
from tiercache.infrastructure.monitoring.logger_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def open_text_cache(name: str, directory: Optional[Path], file_system: LocalFileSystem) -> TieredCache[str]:
    """Opens a cache of text values using the configured settings."""
    return TieredCache(
        name,
        TextCodec(),
        directory=directory,
        protection=get_protection(),
        file_system=file_system,
        background_writes=get_background_writes(),
        max_memory_items=get_memory_max_items(),
    )


def create_dependencies(verbose: bool = False) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    load_configuration()
    log_level = level_from_name("DEBUG" if verbose else get_config("logging.level"))
    setup_logging(
        log_level=log_level,
        log_file=get_config("logging.file"),
        log_format=get_config("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
    )

    dependencies: Dict[str, Any] = {}
    dependencies["ui"] = ConsoleDisplay()
    dependencies["file_system"] = LocalFileSystem()
    dependencies["command_handler"] = CommandHandler(
        cache_factory=partial(open_text_cache, file_system=dependencies["file_system"]),
        purge=partial(purge_cache, file_system=dependencies["file_system"]),
        ui=dependencies["ui"],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


_dependencies: Dict[str, Any] = {}


def get_command_handler() -> CommandHandler:
    if "command_handler" not in _dependencies:
        _dependencies.update(create_dependencies())
    return _dependencies["command_handler"]


def _finish(success: bool) -> None:
    if not success:
        raise typer.Exit(code=1)


# --- Typer App Definition ---
app = typer.Typer(
    name="tiercache",
    help="Inspect and maintain tiercache caches (text values).",
    add_completion=False,
)

# Shared options
DirectoryOption = Annotated[
    Optional[Path],
    typer.Option("--directory", "-d", file_okay=False, help="Cache directory. Defaults to <cache root>/<name>.")
]
NameArgument = Annotated[str, typer.Argument(help="Cache name.")]
KeyArgument = Annotated[str, typer.Argument(help="Cache key.")]


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """tiercache maintenance commands."""
    if "command_handler" not in _dependencies:
        _dependencies.update(create_dependencies(verbose=verbose))


@app.command()
def keys(name: NameArgument, directory: DirectoryOption = None):
    """List the keys stored in a cache and whether they have expired."""
    _finish(get_command_handler().handle_keys(name, directory))


@app.command()
def show(
    name: NameArgument,
    key: KeyArgument,
    allow_expired: Annotated[bool, typer.Option("--allow-expired", help="Show the value even if expired.")] = False,
    directory: DirectoryOption = None,
):
    """Print the value stored under a key."""
    _finish(get_command_handler().handle_show(name, key, allow_expired, directory))


@app.command()
def put(
    name: NameArgument,
    key: KeyArgument,
    value: Annotated[str, typer.Argument(help="Text value to store.")],
    ttl: Annotated[Optional[float], typer.Option("--ttl", help="Seconds until the value expires. Never, if omitted.")] = None,
    directory: DirectoryOption = None,
):
    """Store a text value under a key."""
    _finish(get_command_handler().handle_put(name, key, value, ttl, directory))


@app.command()
def remove(name: NameArgument, key: KeyArgument, directory: DirectoryOption = None):
    """Remove a key from a cache."""
    _finish(get_command_handler().handle_remove(name, key, directory))


@app.command()
def sweep(name: NameArgument, directory: DirectoryOption = None):
    """Remove every expired entry from a cache."""
    _finish(get_command_handler().handle_sweep(name, directory))


@app.command()
def clear(name: NameArgument, directory: DirectoryOption = None):
    """Remove every entry from a cache."""
    _finish(get_command_handler().handle_clear(name, directory))


@app.command()
def purge(
    root: Annotated[Optional[Path], typer.Option("--root", file_okay=False, help="Cache root to delete. Defaults to the configured root.")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
):
    """Delete every cache under the cache root."""
    _finish(get_command_handler().handle_purge(root, assume_yes=yes))


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
