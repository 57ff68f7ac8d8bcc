"""In-memory TTL cache and the read-through catalog provider."""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from intake_pricer.core.config import settings
from intake_pricer.core.exceptions import CatalogFetchException
from intake_pricer.core.logging import logger

from .ingestor import Catalog, parse_catalog


class TTLCache:
    """Process-local key/value cache with per-entry expiry.

    Entries are stored as ``(value, expires_at)``; ``expires_at`` of ``None``
    means the entry never expires (``ttl_seconds <= 0``). Expired entries are
    evicted lazily on read.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._store: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._store[key]
            logger.debug(f"Cache entry expired: {key}")
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds > 0 else None
        self._store[key] = (value, expires_at)

    def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


FetchText = Callable[[], Awaitable[str]]


class CatalogProvider:
    """Read-through access to the parsed catalog.

    ``fetch_text`` is the caller-owned coroutine that downloads the raw catalog
    text (network access is not this package's concern). The parsed
    :class:`Catalog` is cached for ``ttl`` seconds.
    """

    CACHE_KEY = "catalog"

    def __init__(
        self,
        fetch_text: FetchText,
        cache: Optional[TTLCache] = None,
        ttl: Optional[int] = None,
    ):
        if fetch_text is None:
            raise ValueError("fetch_text must not be None")
        self._fetch_text = fetch_text
        self.cache = cache if cache is not None else TTLCache()
        self.ttl = settings.catalog_cache_ttl if ttl is None else ttl

    async def get_catalog(self, force_refresh: bool = False) -> Catalog:
        """Cached catalog, fetching and parsing it on a miss.

        Raises:
            CatalogFetchException: the fetch coroutine failed
        """
        if not force_refresh:
            cached = self.cache.get(self.CACHE_KEY)
            if cached is not None:
                logger.debug("Catalog cache hit")
                return cached

        logger.info("Catalog cache miss, fetching")
        try:
            text = await self._fetch_text()
        except CatalogFetchException:
            raise
        except Exception as e:
            logger.error(f"Catalog fetch failed: {type(e).__name__}: {e}")
            raise CatalogFetchException(str(e)) from e

        catalog = parse_catalog(text)
        self.cache.set(self.CACHE_KEY, catalog, self.ttl)
        return catalog

    def invalidate(self) -> None:
        self.cache.delete(self.CACHE_KEY)
