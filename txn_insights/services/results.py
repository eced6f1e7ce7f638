"""Tagged result returned by every transaction query."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class QueryError(RuntimeError):
    """Raised by :meth:`QueryResult.unwrap` when the query failed."""


class InsufficientDataError(ValueError):
    """The collection is too small to answer the query."""


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a query.

    ``value`` is always usable: on failure it holds the query's safe default
    (zero, ``False``, an empty collection or ``None``) and ``error`` explains
    what went wrong.
    """

    value: T
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, default: T, error: str) -> "QueryResult[T]":
        return cls(value=default, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise QueryError(self.error)
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.error is None else default


__all__ = ["InsufficientDataError", "QueryError", "QueryResult"]
