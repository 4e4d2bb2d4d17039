# catalog/models/product.py

"""Product data model shared by the remote source, cache and CLI."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProductRecord:
    """A single catalog product.  Immutable once constructed."""

    id: str
    name: str
    description: str
    price: float
    image_url: str

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(
                f"Product {self.id!r} has negative price {self.price}"
            )

    @classmethod
    def from_remote(cls, raw: Any) -> "ProductRecord":
        """Map one element of the remote JSON array to a record.

        The endpoint uses ``title``/``image`` and integer ids; locally we
        store ``name``/``image_url`` and string ids.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Expected a JSON object, got {type(raw).__name__}")
        try:
            return cls(
                id=str(raw["id"]),
                name=str(raw["title"]),
                description=str(raw["description"]),
                price=float(raw["price"]),
                image_url=str(raw["image"]),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed product record: {exc}") from exc

    @classmethod
    def from_dict(cls, data: Any) -> "ProductRecord":
        """Rebuild a record from its cached JSON form."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        try:
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                description=str(data["description"]),
                price=float(data["price"]),
                image_url=str(data["imageUrl"]),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed cached record: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the cached JSON form."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "imageUrl": self.image_url,
        }
