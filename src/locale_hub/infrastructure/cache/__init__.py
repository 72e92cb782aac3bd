from .database import DatabaseCacheStore
from .memory import MemoryCacheStore

__all__ = ["DatabaseCacheStore", "MemoryCacheStore"]
