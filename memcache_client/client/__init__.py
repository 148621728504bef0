"""Client facade for the memcache client."""

from .memcache import CasMemcache, Memcache
from .operations import OperationTranslator

__all__ = ["CasMemcache", "Memcache", "OperationTranslator"]
