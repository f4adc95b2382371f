"""Key-value store contract.

Documents are JSON objects stored under string keys. Versioned writes
compare the stored document's ``version`` field (0 when absent) against
``expected_version`` and bump it on success.
"""

from __future__ import annotations

from typing import Any, Protocol

Document = dict[str, Any]


def document_version(doc: Document | None) -> int | None:
    """Version of a stored document, None when the key is absent."""
    if doc is None:
        return None
    return int(doc.get("version") or 0)


class KVStore(Protocol):
    """Durable mapping from string key to JSON document, with prefix scan."""

    async def get(self, key: str) -> Document | None:
        """Return the document stored at key, or None."""
        ...

    async def set(self, key: str, value: Document, expected_version: int | None = None) -> Document:
        """Write a document and return what was stored.

        With ``expected_version`` set, raise ConflictError unless the stored
        version matches, and store the document with ``version + 1``.
        """
        ...

    async def get_by_prefix(self, prefix: str) -> list[Document]:
        """Return every document whose key starts with prefix (unordered)."""
        ...

    async def ping(self) -> bool:
        ...

    async def close(self) -> None:
        ...
