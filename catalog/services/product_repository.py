# catalog/services/product_repository.py

"""Cache-aware product repository.

Decides per call whether the product list comes from the remote source
or from the local cache, and turns every error into a ``Failure`` value.
The cache and the connectivity probe are optional; leaving them out
yields the simpler configurations:

- no cache: remote only, remote errors surface as ``ServerFailure``;
- no probe: any remote error is treated like being offline and falls
  back to the cache.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from catalog.models.exceptions import CacheError, ServerError
from catalog.models.product import ProductRecord
from catalog.models.result import (
    CacheFailure,
    Err,
    Failure,
    NetworkFailure,
    Ok,
    Result,
    ServerFailure,
)

logger = logging.getLogger("catalog.repository")

NO_CONNECTION = "No internet connection"


class ProductSource(Protocol):
    async def get_products(self) -> list[ProductRecord]: ...


class ProductCache(Protocol):
    async def get_last_products(self) -> list[ProductRecord]: ...

    async def cache_products(self, products: Sequence[ProductRecord]) -> None: ...


class ConnectivityChecker(Protocol):
    async def has_connection(self) -> bool: ...


class ProductRepository:
    """Single entry point for "give me the current product list"."""

    def __init__(
        self,
        remote: ProductSource,
        cache: ProductCache | None = None,
        connectivity: ConnectivityChecker | None = None,
    ) -> None:
        self.remote = remote
        self.cache = cache
        self.connectivity = connectivity

    # ── Private helpers ──────────────────────────────────

    async def _is_offline(self) -> bool:
        """True only when a probe is wired and says there is no network."""
        if self.connectivity is None:
            return False
        try:
            return not await self.connectivity.has_connection()
        except Exception as exc:
            # Unknown state: let the remote fetch decide
            logger.warning(
                "Connectivity probe raised, assuming online: %s",
                exc,
                exc_info=True,
            )
            return False

    async def _read_cache(self) -> Result[list[ProductRecord]]:
        if self.cache is None:
            return Err(CacheFailure("no cache configured"))
        try:
            products = await self.cache.get_last_products()
        except CacheError as exc:
            logger.info("Cache read failed: %s", exc.message)
            return Err(CacheFailure(exc.message))
        except Exception as exc:
            logger.error(
                "Unexpected cache read error: %s", exc, exc_info=True
            )
            return Err(CacheFailure(str(exc)))
        logger.info("Serving %d products from cache", len(products))
        return Ok(products)

    async def _write_cache(self, products: list[ProductRecord]) -> None:
        """Persist a fresh remote result; failures are logged, not raised."""
        if self.cache is None:
            return
        try:
            await self.cache.cache_products(products)
        except CacheError as exc:
            logger.warning("Cache write failed, ignoring: %s", exc.message)
        except Exception as exc:
            logger.error(
                "Unexpected cache write error, ignoring: %s",
                exc,
                exc_info=True,
            )

    async def _fetch_remote(self) -> Result[list[ProductRecord]]:
        try:
            products = await self.remote.get_products()
        except ServerError as exc:
            logger.warning("Remote fetch failed: %s", exc.message)
            return Err(ServerFailure(exc.message))
        except Exception as exc:
            logger.error(
                "Unexpected remote fetch error: %s", exc, exc_info=True
            )
            return Err(ServerFailure(str(exc) or type(exc).__name__))
        return Ok(products)

    # ── Public API ───────────────────────────────────────

    async def get_products(self) -> Result[list[ProductRecord]]:
        """Return the product list, preferring the remote when reachable.

        1. Probe reports offline: cache only; a miss is a
           ``NetworkFailure``.
        2. Remote succeeds: refresh the cache (best effort) and return
           the remote list.
        3. Remote fails: fall back to the cache; if that misses too,
           return the remote's ``ServerFailure``.
        """
        if await self._is_offline():
            logger.info("Offline, reading products from cache only")
            cached = await self._read_cache()
            if isinstance(cached, Ok):
                return cached
            return Err(NetworkFailure(NO_CONNECTION))

        fetched = await self._fetch_remote()
        if isinstance(fetched, Ok):
            await self._write_cache(fetched.value)
            return fetched

        remote_failure: Failure = fetched.failure
        if self.cache is None:
            return fetched

        cached = await self._read_cache()
        if isinstance(cached, Ok):
            logger.info(
                "Remote failed (%s), fell back to cache",
                remote_failure.message,
            )
            return cached
        return Err(remote_failure)
