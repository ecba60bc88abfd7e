"""Domain Layer: value objects, contracts and events for the tiered cache.

Nothing in here touches the disk or the clock directly; concrete behaviour
lives in the infrastructure layer.
"""
