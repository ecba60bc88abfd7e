"""In-memory tier adapters."""
