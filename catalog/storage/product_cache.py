# catalog/storage/product_cache.py

"""Local product cache with a fixed time-to-live.

The cache keeps two entries in the key-value store: the JSON payload and
an ISO-8601 timestamp recording when that payload was written.  The
timestamp is the cache's "ready" flag, so writes always invalidate it
first and restore it last.  A reader therefore sees either a complete
entry or no entry at all, never a fresh timestamp next to an old payload.
"""

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from catalog.config.settings import Settings
from catalog.models.exceptions import CacheError
from catalog.models.product import ProductRecord
from catalog.storage.kv_store import KeyValueStore

logger = logging.getLogger("catalog.cache")

NO_CACHED_PRODUCTS = "no cached products"
CACHE_EXPIRED = "cache expired"

# Written in place of the timestamp while a payload write is in progress
_INVALIDATED = ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """A product list together with the time it was cached."""

    products: tuple[ProductRecord, ...]
    cached_at: datetime

    def age_seconds(self, now: datetime) -> float:
        return (now - self.cached_at).total_seconds()


class LocalProductCache:
    """TTL-bound cache of the last product list fetched from the remote."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._ttl: float = (
            Settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        )
        self._clock = clock
        self._payload_key = Settings.CACHE_PAYLOAD_KEY
        self._meta_key = Settings.CACHE_META_KEY

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def now(self) -> datetime:
        """Current time according to the cache's clock."""
        return self._clock()

    async def cache_products(self, products: Sequence[ProductRecord]) -> None:
        """Replace the cached list and stamp it with the current time.

        Raises:
            CacheError: if any step of the write did not commit.  The
                timestamp is left invalidated in that case.
        """
        payload = json.dumps(
            [p.to_dict() for p in products], ensure_ascii=False
        )
        cached_at = self._clock()

        if not self._store.put(self._meta_key, _INVALIDATED):
            raise CacheError("failed to invalidate cache timestamp")
        if not self._store.put(self._payload_key, payload):
            raise CacheError("failed to write cached products")
        if not self._store.put(self._meta_key, cached_at.isoformat()):
            raise CacheError("failed to write cache timestamp")

        logger.info(
            "Cached %d products at %s", len(products), cached_at.isoformat()
        )

    async def get_last_products(self) -> list[ProductRecord]:
        """Return the cached list if present and younger than the TTL.

        Raises:
            CacheError: ``"no cached products"`` when nothing usable is
                stored, ``"cache expired"`` when the entry is older than
                the TTL.
        """
        entry = await self.read_entry()
        return list(entry.products)

    async def read_entry(self) -> CacheEntry:
        """Load and validate the cached entry.  See ``get_last_products``."""
        raw_ts = self._store.get(self._meta_key)
        if not raw_ts:
            logger.debug("Cache miss: no timestamp stored")
            raise CacheError(NO_CACHED_PRODUCTS)

        try:
            cached_at = datetime.fromisoformat(raw_ts)
        except ValueError:
            logger.warning("Cache timestamp unparsable: %r", raw_ts)
            raise CacheError(NO_CACHED_PRODUCTS) from None
        if cached_at.tzinfo is None:
            cached_at = cached_at.replace(tzinfo=timezone.utc)

        age = (self._clock() - cached_at).total_seconds()
        if age > self._ttl:
            logger.info(
                "Cache expired (age %.0fs > ttl %.0fs)", age, self._ttl
            )
            raise CacheError(CACHE_EXPIRED)

        payload = self._store.get(self._payload_key)
        if payload is None:
            logger.warning("Cache timestamp present but payload missing")
            raise CacheError(NO_CACHED_PRODUCTS)

        try:
            data = json.loads(payload)
            if not isinstance(data, list):
                raise ValueError("cached payload is not a list")
            products = tuple(ProductRecord.from_dict(item) for item in data)
        except ValueError as exc:
            logger.warning("Cached payload unreadable: %s", exc)
            raise CacheError(NO_CACHED_PRODUCTS) from exc

        logger.debug("Cache hit: %d products, age %.0fs", len(products), age)
        return CacheEntry(products=products, cached_at=cached_at)

    async def clear(self) -> bool:
        """Drop the cached entry.  Returns True if anything was removed."""
        removed_meta = self._store.delete(self._meta_key)
        removed_payload = self._store.delete(self._payload_key)
        removed = removed_meta or removed_payload
        logger.info("Cache cleared (entry present: %s)", removed)
        return removed
