# catalog/sources/product_source.py

"""Remote product source backed by the public products endpoint."""

import logging
from typing import Any

from curl_cffi.requests import AsyncSession

from catalog.config.settings import Settings
from catalog.models.exceptions import ServerError
from catalog.models.product import ProductRecord

logger = logging.getLogger("catalog.remote")


class RemoteProductSource:
    """Fetches the current product list with a single GET request.

    No retries happen here; a failed call raises ``ServerError`` and the
    repository decides what to fall back to.
    """

    def __init__(
        self,
        url: str | None = None,
        session: Any = None,
    ) -> None:
        self.settings = Settings()
        self.url = url or self.settings.PRODUCTS_URL
        self._session: Any = session
        self._owns_session = session is None
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _get_session(self) -> Any:
        if self._session is None:
            self._session = AsyncSession(
                impersonate=self.settings.IMPERSONATE_BROWSER
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this source created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def get_products(self) -> list[ProductRecord]:
        """Return the products in the order the endpoint lists them.

        Raises:
            ServerError: on a non-200 status, a transport error or a body
                that does not decode into product records.
        """
        session = self._get_session()
        try:
            resp = await session.get(
                self.url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            logger.warning(
                "Request to %s failed: %s", self.url, exc, exc_info=True
            )
            raise ServerError(str(exc) or "Network error") from exc

        if resp.status_code != 200:
            logger.warning("HTTP %d from %s", resp.status_code, self.url)
            raise ServerError(
                f"Failed to load products (HTTP {resp.status_code})"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("Non-JSON body from %s: %s", self.url, exc)
            raise ServerError("Failed to decode products response") from exc

        if not isinstance(data, list):
            raise ServerError(
                f"Expected a JSON array of products, got {type(data).__name__}"
            )

        try:
            products = [ProductRecord.from_remote(item) for item in data]
        except ValueError as exc:
            logger.warning("Undecodable product from %s: %s", self.url, exc)
            raise ServerError(str(exc)) from exc

        logger.info("Fetched %d products from %s", len(products), self.url)
        return products
