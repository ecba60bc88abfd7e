"""File system adapters."""
