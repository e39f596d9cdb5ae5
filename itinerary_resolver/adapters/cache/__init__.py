"""Cache adapters - Implementations of the KeyValueStorePort.

Available implementations:
- InMemoryCache: Thread-safe in-memory store with lazy TTL
- NullCache: No-op store (always misses)
"""

from .memory_cache import InMemoryCache
from .null_cache import NullCache

__all__ = ["InMemoryCache", "NullCache"]
