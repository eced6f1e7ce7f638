"""Service layer entrypoints for transaction reporting."""

from .results import InsufficientDataError, QueryError, QueryResult
from .transaction_queries import TransactionQueryService

__all__ = [
    "InsufficientDataError",
    "QueryError",
    "QueryResult",
    "TransactionQueryService",
]
