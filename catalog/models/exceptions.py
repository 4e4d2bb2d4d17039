# catalog/models/exceptions.py

"""Exceptions raised by the data sources.

These never leave the repository layer: ``ProductRepository`` translates
them into ``Failure`` values.
"""


class CatalogError(Exception):
    """Base class for data-source errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ServerError(CatalogError):
    """The remote product endpoint failed or could not be reached."""


class CacheError(CatalogError):
    """The local cache is empty, corrupt, expired or not writable."""
