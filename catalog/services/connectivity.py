# catalog/services/connectivity.py

"""Network connectivity probe."""

import logging
import time
from dataclasses import dataclass
from typing import Any

from curl_cffi.requests import AsyncSession

from catalog.config.settings import Settings

logger = logging.getLogger("catalog.connectivity")


@dataclass
class ConnectivityStatus:
    """Outcome of a single connectivity probe."""

    online: bool
    latency_ms: float
    message: str

    @property
    def slow(self) -> bool:
        return self.online and self.latency_ms > Settings.CONNECTIVITY_SLOW_MS


class ConnectivityProbe:
    """Reports whether the network is reachable.

    Any HTTP response from the probe URL, whatever its status, counts as
    connected: the question is reachability, not endpoint health.
    """

    def __init__(
        self,
        url: str | None = None,
        session: Any = None,
        timeout: int | None = None,
    ) -> None:
        self.url = url or Settings.CONNECTIVITY_URL
        self._session: Any = session
        self._owns_session = session is None
        self._timeout = timeout or Settings.CONNECTIVITY_TIMEOUT

    async def close(self) -> None:
        """Close the HTTP session if this probe created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def check(self) -> ConnectivityStatus:
        """Probe the network once and report status and latency."""
        if self._session is None:
            self._session = AsyncSession(
                impersonate=Settings.IMPERSONATE_BROWSER
            )

        start = time.monotonic()
        try:
            resp = await self._session.get(self.url, timeout=self._timeout)
        except Exception as exc:
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.info("Connectivity probe to %s failed: %s", self.url, exc)
            return ConnectivityStatus(
                online=False,
                latency_ms=elapsed_ms,
                message=str(exc)[:80],
            )

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(
            "Connectivity probe to %s: HTTP %d (%.0fms)",
            self.url,
            resp.status_code,
            elapsed_ms,
        )
        return ConnectivityStatus(
            online=True,
            latency_ms=elapsed_ms,
            message=f"HTTP {resp.status_code}",
        )

    async def has_connection(self) -> bool:
        """Return True when the network is reachable."""
        status = await self.check()
        return status.online
