"""Domain Event definitions.

Represents internal failures the cache tolerates (read misses caused by
corrupt records, failed disk writes, failed purges) so callers can observe
them through a diagnostics hook instead of having them silently discarded.
"""
