"""Redis-backed key-value store. Each document is a JSON string under its key."""

from __future__ import annotations

import json
import re

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError, WatchError

from tourney.exceptions import ConflictError, StoreError
from tourney.kv.base import Document, document_version

logger = structlog.get_logger()

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _escape_glob(prefix: str) -> str:
    return _GLOB_SPECIAL.sub(r"\\\1", prefix)


def _decode(raw: str | None) -> Document | None:
    if raw is None:
        return None
    return json.loads(raw)


class RedisKVStore:
    """KVStore over a redis.asyncio client."""

    def __init__(self, client: aioredis.Redis, scan_batch_size: int = 500) -> None:
        self.redis = client
        self.scan_batch_size = scan_batch_size

    @classmethod
    def from_url(cls, url: str, scan_batch_size: int = 500) -> RedisKVStore:
        client = aioredis.from_url(  # type: ignore[no-untyped-call]
            url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=50,
        )
        return cls(client, scan_batch_size=scan_batch_size)

    async def get(self, key: str) -> Document | None:
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            raise StoreError(f"Failed to read {key}: {e}") from e
        return _decode(raw)

    async def set(self, key: str, value: Document, expected_version: int | None = None) -> Document:
        if expected_version is None:
            try:
                await self.redis.set(key, json.dumps(value))
            except RedisError as e:
                raise StoreError(f"Failed to write {key}: {e}") from e
            return value

        doc = {**value, "version": expected_version + 1}
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                await pipe.watch(key)
                current = document_version(_decode(await pipe.get(key)))
                if current != expected_version:
                    await pipe.unwatch()
                    raise ConflictError(
                        f"Version mismatch on {key}: expected {expected_version}, found {current}"
                    )
                pipe.multi()
                pipe.set(key, json.dumps(doc))
                await pipe.execute()
        except WatchError as e:
            raise ConflictError(f"Concurrent write on {key}") from e
        except RedisError as e:
            raise StoreError(f"Failed to write {key}: {e}") from e
        return doc

    async def get_by_prefix(self, prefix: str) -> list[Document]:
        try:
            keys = [
                k async for k in self.redis.scan_iter(
                    match=f"{_escape_glob(prefix)}*", count=self.scan_batch_size
                )
            ]
            docs: list[Document] = []
            for i in range(0, len(keys), self.scan_batch_size):
                values = await self.redis.mget(keys[i:i + self.scan_batch_size])
                docs.extend(d for d in (_decode(v) for v in values) if d is not None)
        except RedisError as e:
            raise StoreError(f"Failed to scan {prefix}*: {e}") from e
        return docs

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError:
            logger.warning("redis_ping_failed", exc_info=True)
            return False

    async def close(self) -> None:
        await self.redis.aclose()
