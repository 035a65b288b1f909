"""
Document cache abstraction.

The generator can look up and store finished compact documents through a
``DocumentCache``. Only the interface is needed by the generator; the
in-memory implementation serves tests, the CLI and the HTTP facade.

Architecture:
    ::

        DocumentCache (Protocol)
        └── InMemoryDocumentCache   single-process, bounded LRU

        API: get(key) → document | None
             put(key, document)

Examples:
    >>> cache = InMemoryDocumentCache(max_size=10)
    >>> cache.put("k", "<doc />")
    >>> cache.get("k")
    '<doc />'

Guardrails:
    ❌ DON'T: Cache readable documents
    ✅ DO: Cache compact output only; readable output is derived from it

Tags:
    cache, lru, ttl
"""

from __future__ import annotations

import hashlib
import json
import time
from collections import OrderedDict
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from wsdl_automation.config import GeneratorConfig


class DocumentCache(Protocol):
    """Protocol for document cache implementations."""

    def get(self, key: str) -> str | None:
        """Return the cached document, or ``None`` if missing or expired."""
        ...

    def put(self, key: str, document: str) -> None:
        """Store a document under ``key``."""
        ...


class InMemoryDocumentCache:
    """Bounded in-memory document cache with optional TTL.

    Uses LRU eviction when ``max_size`` is reached.

    Attributes:
        max_size: Maximum number of documents before LRU eviction.
        ttl_seconds: Lifetime of an entry (``None`` → no expiry).
    """

    def __init__(self, *, max_size: int = 128, ttl_seconds: float | None = None):
        self._store: OrderedDict[str, tuple[str, float | None]] = OrderedDict()
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None

        document, expires_at = entry
        if expires_at is not None and time.monotonic() > expires_at:
            del self._store[key]
            return None

        self._store.move_to_end(key)
        return document

    def put(self, key: str, document: str) -> None:
        expires_at = time.monotonic() + self.ttl_seconds if self.ttl_seconds else None
        if key in self._store:
            self._store.move_to_end(key)
        elif len(self._store) >= self.max_size:
            self._store.popitem(last=False)
        self._store[key] = (document, expires_at)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


def cache_key(config: "GeneratorConfig") -> str:
    """Stable key over every setting and source file that shapes the compact document.

    Editing a source file changes the key, so stale documents are never
    served for it.
    """
    data = config.to_dict()
    data.pop("cache_documents", None)
    data["seed_types"] = [t.name for t in config.types]
    data["seed_operations"] = [o.name for o in config.operations]
    data["source_digests"] = {str(path): _file_digest(path) for path in config.source_files}
    payload = json.dumps(data, sort_keys=True)
    return "wsdl:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _file_digest(path: Path) -> str | None:
    # unreadable files are skipped by the generator; they still key as absent
    try:
        return hashlib.sha256(path.read_bytes()).hexdigest()
    except OSError:
        return None
