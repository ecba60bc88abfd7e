"""Tiered cache implementation.

Memory tier (``MemoryStore``) in front of a disk tier (one JSON record per
key), with per-entry expiration, key sanitisation and a purge utility.
Bounded Context: Cache Management
"""
