# tests/helpers.py

"""Builders and fakes shared across test modules."""

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from catalog.models.product import ProductRecord

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_product(
    product_id: str = "1", name: str = "A", price: float = 9.99,
) -> ProductRecord:
    """Create a minimal ProductRecord for testing."""
    return ProductRecord(
        id=product_id,
        name=name,
        description="d",
        price=price,
        image_url="u",
    )


def raw_product(product_id: int = 1, title: str = "A") -> dict[str, Any]:
    """One element of the remote JSON array."""
    return {
        "id": product_id,
        "title": title,
        "description": "d",
        "price": 9.99,
        "image": "u",
    }


class FakeClock:
    """Manually advanced clock returning aware datetimes."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class MemoryStore:
    """Dict-backed KeyValueStore with switchable write failures."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.fail_keys: set[str] = set()
        self.writes: list[tuple[str, str]] = []

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def put(self, key: str, value: str) -> bool:
        if key in self.fail_keys:
            return False
        self.data[key] = value
        self.writes.append((key, value))
        return True

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


def make_response(status_code: int = 200, body: Any = None) -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body
    return resp


def make_session(
    response: Any = None, error: Exception | None = None,
) -> MagicMock:
    """Build a fake async session whose ``get`` returns or raises."""
    session = MagicMock()
    session.get = AsyncMock(return_value=response, side_effect=error)
    session.close = AsyncMock()
    return session
