"""Key-value store lifecycle."""

from __future__ import annotations

from tourney.config import Settings
from tourney.kv.base import Document, KVStore
from tourney.kv.memory import MemoryKVStore
from tourney.kv.redis_store import RedisKVStore

__all__ = ["Document", "KVStore", "MemoryKVStore", "RedisKVStore", "close_store", "get_store", "init_store"]

_store: KVStore | None = None


async def init_store(settings: Settings) -> KVStore:
    """Create the configured store backend."""
    global _store  # noqa: PLW0603
    if settings.store_backend == "memory":
        _store = MemoryKVStore()
    elif settings.store_backend == "redis":
        _store = RedisKVStore.from_url(settings.redis_url, scan_batch_size=settings.store_scan_batch_size)
    else:
        msg = f"Unknown store backend: {settings.store_backend}"
        raise ValueError(msg)
    return _store


async def close_store() -> None:
    """Close the store connection."""
    global _store  # noqa: PLW0603
    if _store:
        await _store.close()
        _store = None


def get_store() -> KVStore:
    """Get the store (FastAPI dependency)."""
    if _store is None:
        msg = "Store not initialized. Call init_store() first."
        raise RuntimeError(msg)
    return _store
