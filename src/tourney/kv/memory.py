"""In-process key-value store for local development and tests."""

from __future__ import annotations

import asyncio
import json

from tourney.exceptions import ConflictError
from tourney.kv.base import Document, document_version


class MemoryKVStore:
    """KVStore kept in a dict. Documents are copied through JSON on every read and write."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Document | None:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Document, expected_version: int | None = None) -> Document:
        if expected_version is None:
            self._data[key] = json.dumps(value)
            return json.loads(self._data[key])

        async with self._lock:
            current = document_version(await self.get(key))
            if current != expected_version:
                raise ConflictError(
                    f"Version mismatch on {key}: expected {expected_version}, found {current}"
                )
            self._data[key] = json.dumps({**value, "version": expected_version + 1})
            return json.loads(self._data[key])

    async def get_by_prefix(self, prefix: str) -> list[Document]:
        return [json.loads(raw) for key, raw in list(self._data.items()) if key.startswith(prefix)]

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._data.clear()
