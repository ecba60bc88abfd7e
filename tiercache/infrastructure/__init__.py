"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache to the outside world (local disk, in-process memory,
configuration files, the console) by implementing the interfaces defined
in the domain layer.
"""
