"""Core Application Layer: Orchestrates the maintenance use cases.

Connects the CLI entry point with the cache engine and the display.
"""
