# catalog/models/result.py

"""Tagged success/failure values returned by the product repository.

Expected failures (remote down, cache empty or stale, offline) travel as
``Err(failure)`` values instead of exceptions, so callers always handle
both arms explicitly::

    result = await repository.get_products()
    message = result.fold(
        lambda failure: failure.message,
        lambda products: f"{len(products)} products",
    )
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Failure:
    """Base failure: a human-readable message, nothing else."""

    message: str


@dataclass(frozen=True)
class ServerFailure(Failure):
    """Remote reachable but it failed or answered with an error."""


@dataclass(frozen=True)
class CacheFailure(Failure):
    """Local cache empty, corrupt or expired."""


@dataclass(frozen=True)
class NetworkFailure(Failure):
    """No connection according to the connectivity probe."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success arm."""

    value: T

    def is_ok(self) -> bool:
        return True

    def fold(
        self,
        on_failure: Callable[[Failure], R],
        on_success: Callable[[T], R],
    ) -> R:
        return on_success(self.value)


@dataclass(frozen=True)
class Err:
    """Failure arm."""

    failure: Failure

    def is_ok(self) -> bool:
        return False

    def fold(
        self,
        on_failure: Callable[[Failure], R],
        on_success: Callable[[Any], R],
    ) -> R:
        return on_failure(self.failure)


Result = Union[Ok[T], Err]
