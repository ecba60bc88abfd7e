"""Thread synchronisation primitives used by the cache engine."""
