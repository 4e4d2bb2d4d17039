# tests/test_product_repository.py

"""Tests for the cache-aware product repository."""

import unittest
from unittest.mock import AsyncMock, MagicMock

from catalog.config.settings import Settings
from catalog.models.exceptions import CacheError, ServerError
from catalog.models.product import ProductRecord
from catalog.models.result import (
    CacheFailure,
    Err,
    NetworkFailure,
    Ok,
    ServerFailure,
)
from catalog.services.get_products import GetProductsUseCase
from catalog.services.product_repository import (
    NO_CONNECTION,
    ProductRepository,
)
from catalog.sources.product_source import RemoteProductSource
from catalog.storage.product_cache import LocalProductCache
from helpers import (
    FakeClock,
    MemoryStore,
    make_product,
    make_response,
    make_session,
    raw_product,
)


def _remote(
    products: list[ProductRecord] | None = None,
    error: Exception | None = None,
) -> MagicMock:
    """Fake remote source returning ``products`` or raising ``error``."""
    remote = MagicMock()
    remote.get_products = AsyncMock(
        return_value=products or [], side_effect=error
    )
    return remote


def _probe(online: bool = True, error: Exception | None = None) -> MagicMock:
    probe = MagicMock()
    probe.has_connection = AsyncMock(return_value=online, side_effect=error)
    return probe


class _CacheCase(unittest.IsolatedAsyncioTestCase):
    """Base case with a real cache over an in-memory store."""

    def setUp(self) -> None:
        self.store = MemoryStore()
        self.clock = FakeClock()
        self.cache = LocalProductCache(self.store, clock=self.clock)
        self.remote_products = [make_product("r1", "Remote")]
        self.cached_products = [make_product("c1", "Cached")]

    async def _seed_cache(self, age_seconds: float = 0) -> None:
        await self.cache.cache_products(self.cached_products)
        self.clock.advance(age_seconds)


class TestRemoteAvailable(_CacheCase):
    """Reachable remote wins over the cache."""

    async def test_prefers_remote_over_valid_cache(self) -> None:
        """Remote result is returned even when the cache is fresh."""
        await self._seed_cache()
        repo = ProductRepository(_remote(self.remote_products), self.cache)
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.remote_products))

    async def test_remote_result_overwrites_cache(self) -> None:
        """After a fetch the cache holds the remote list."""
        await self._seed_cache()
        repo = ProductRepository(_remote(self.remote_products), self.cache)
        await repo.get_products()
        self.assertEqual(
            await self.cache.get_last_products(), self.remote_products
        )

    async def test_cache_write_failure_still_succeeds(self) -> None:
        """A failed write after a good fetch is not surfaced."""
        self.store.fail_keys.add(Settings.CACHE_PAYLOAD_KEY)
        repo = ProductRepository(_remote(self.remote_products), self.cache)
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.remote_products))

    async def test_unexpected_cache_write_error_ignored(self) -> None:
        """Even a non-CacheError from the cache write is swallowed."""
        cache = MagicMock()
        cache.cache_products = AsyncMock(side_effect=RuntimeError("disk"))
        repo = ProductRepository(_remote(self.remote_products), cache)
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.remote_products))

    async def test_online_probe_goes_to_remote(self) -> None:
        """With a probe reporting online the remote is used."""
        remote = _remote(self.remote_products)
        repo = ProductRepository(remote, self.cache, _probe(online=True))
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.remote_products))
        remote.get_products.assert_awaited_once()


class TestRemoteFailed(_CacheCase):
    """Remote failure falls back to the cache."""

    async def test_falls_back_to_valid_cache(self) -> None:
        """Remote ServerError + fresh cache → cached list."""
        await self._seed_cache(age_seconds=60)
        repo = ProductRepository(
            _remote(error=ServerError("HTTP 500")), self.cache
        )
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.cached_products))

    async def test_any_remote_exception_falls_back(self) -> None:
        """Without a probe, any remote exception is treated like offline."""
        await self._seed_cache()
        repo = ProductRepository(
            _remote(error=TimeoutError("read timed out")), self.cache
        )
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.cached_products))

    async def test_remote_message_wins_over_cache_message(self) -> None:
        """Both paths failing → ServerFailure with the remote message."""
        repo = ProductRepository(
            _remote(error=ServerError("Failed to load products")),
            self.cache,
        )
        result = await repo.get_products()
        self.assertEqual(result, Err(ServerFailure("Failed to load products")))

    async def test_stale_cache_reports_remote_failure(self) -> None:
        """A cache older than the TTL does not rescue a failed fetch."""
        await self._seed_cache(age_seconds=4000)
        repo = ProductRepository(
            _remote(error=ServerError("upstream down")), self.cache
        )
        result = await repo.get_products()
        self.assertEqual(result, Err(ServerFailure("upstream down")))

    async def test_unexpected_remote_error_message(self) -> None:
        """A bare exception's text becomes the failure message."""
        repo = ProductRepository(
            _remote(error=RuntimeError("socket closed")), self.cache
        )
        result = await repo.get_products()
        self.assertEqual(result, Err(ServerFailure("socket closed")))

    async def test_unexpected_cache_read_error_contained(self) -> None:
        """A non-CacheError from the cache read still yields a Result."""
        cache = MagicMock()
        cache.get_last_products = AsyncMock(side_effect=RuntimeError("io"))
        repo = ProductRepository(_remote(error=ServerError("down")), cache)
        result = await repo.get_products()
        self.assertEqual(result, Err(ServerFailure("down")))


class TestRemoteOnly(unittest.IsolatedAsyncioTestCase):
    """Repository wired without a cache."""

    async def test_success(self) -> None:
        """Remote data is returned directly."""
        products = [make_product()]
        repo = ProductRepository(_remote(products))
        self.assertEqual(await repo.get_products(), Ok(products))

    async def test_failure_surfaces_server_failure(self) -> None:
        """No fallback: the remote failure is returned as-is."""
        repo = ProductRepository(_remote(error=ServerError("HTTP 404")))
        result = await repo.get_products()
        self.assertEqual(result, Err(ServerFailure("HTTP 404")))

    async def test_offline_without_cache(self) -> None:
        """Offline and nothing to fall back on → NetworkFailure."""
        remote = _remote([make_product()])
        repo = ProductRepository(remote, connectivity=_probe(online=False))
        result = await repo.get_products()
        self.assertEqual(result, Err(NetworkFailure(NO_CONNECTION)))
        remote.get_products.assert_not_awaited()


class TestOffline(_CacheCase):
    """Probe reporting no connection: cache only, remote untouched."""

    async def test_serves_cache_when_offline(self) -> None:
        """Valid cache is returned without contacting the remote."""
        await self._seed_cache()
        remote = _remote(self.remote_products)
        repo = ProductRepository(remote, self.cache, _probe(online=False))
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.cached_products))
        remote.get_products.assert_not_awaited()

    async def test_network_failure_when_cache_empty(self) -> None:
        """Offline with an empty cache → NetworkFailure."""
        remote = _remote(self.remote_products)
        repo = ProductRepository(remote, self.cache, _probe(online=False))
        result = await repo.get_products()
        self.assertIsInstance(result, Err)
        assert isinstance(result, Err)
        self.assertIsInstance(result.failure, NetworkFailure)
        remote.get_products.assert_not_awaited()

    async def test_network_failure_when_cache_expired(self) -> None:
        """Offline with a stale cache → NetworkFailure."""
        await self._seed_cache(age_seconds=3601)
        repo = ProductRepository(
            _remote(self.remote_products), self.cache, _probe(online=False)
        )
        result = await repo.get_products()
        self.assertEqual(result, Err(NetworkFailure(NO_CONNECTION)))

    async def test_offline_does_not_touch_cache_entry(self) -> None:
        """Serving from cache does not rewrite it."""
        await self._seed_cache()
        writes_before = len(self.store.writes)
        repo = ProductRepository(
            _remote(self.remote_products), self.cache, _probe(online=False)
        )
        await repo.get_products()
        self.assertEqual(len(self.store.writes), writes_before)

    async def test_probe_error_assumes_online(self) -> None:
        """A probe that raises does not block the remote fetch."""
        remote = _remote(self.remote_products)
        repo = ProductRepository(
            remote, self.cache, _probe(error=OSError("dns"))
        )
        result = await repo.get_products()
        self.assertEqual(result, Ok(self.remote_products))


class TestCacheFailureValues(unittest.IsolatedAsyncioTestCase):
    """CacheError messages surface as CacheFailure internally."""

    async def test_read_cache_wraps_cache_error(self) -> None:
        """_read_cache maps CacheError to CacheFailure."""
        cache = MagicMock()
        cache.get_last_products = AsyncMock(
            side_effect=CacheError("cache expired")
        )
        repo = ProductRepository(_remote(), cache)
        result = await repo._read_cache()
        self.assertEqual(result, Err(CacheFailure("cache expired")))


class TestEndToEnd(unittest.IsolatedAsyncioTestCase):
    """Real source and cache with a fake HTTP session."""

    async def test_empty_store_fetch_populates_cache(self) -> None:
        """Remote record is returned and cached with a fresh timestamp."""
        store = MemoryStore()
        clock = FakeClock()
        cache = LocalProductCache(store, clock=clock)
        source = RemoteProductSource(
            session=make_session(make_response(200, [raw_product(1, "A")]))
        )
        use_case = GetProductsUseCase(ProductRepository(source, cache))

        result = await use_case()

        expected = ProductRecord(
            id="1", name="A", description="d", price=9.99, image_url="u"
        )
        self.assertEqual(result, Ok([expected]))
        entry = await cache.read_entry()
        self.assertEqual(list(entry.products), [expected])
        self.assertEqual(entry.cached_at, clock.current)

    async def test_stale_cache_and_remote_error(self) -> None:
        """Stale cache + HTTP error → ServerFailure with remote message."""
        store = MemoryStore()
        clock = FakeClock()
        cache = LocalProductCache(store, clock=clock)
        await cache.cache_products([make_product()])
        clock.advance(4000)
        source = RemoteProductSource(
            session=make_session(make_response(500, None))
        )
        repo = ProductRepository(source, cache)

        result = await repo.get_products()

        self.assertEqual(
            result,
            Err(ServerFailure("Failed to load products (HTTP 500)")),
        )


class TestGetProductsUseCase(unittest.IsolatedAsyncioTestCase):
    """The use case delegates straight to the repository."""

    async def test_returns_repository_result(self) -> None:
        """Whatever the repository returns is passed through."""
        repo = MagicMock()
        repo.get_products = AsyncMock(return_value=Err(CacheFailure("x")))
        result = await GetProductsUseCase(repo)()
        self.assertEqual(result, Err(CacheFailure("x")))
        repo.get_products.assert_awaited_once()


if __name__ == "__main__":
    unittest.main()
