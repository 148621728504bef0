"""In-process transport for the memcache client."""

from .store import InMemoryMemcache

__all__ = ["InMemoryMemcache"]
