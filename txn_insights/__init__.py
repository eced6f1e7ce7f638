"""Read-only reporting queries over a JSON file of transfer records.

Typical use::

    from txn_insights import TransactionQueryService

    service = TransactionQueryService.from_file("data/transactions.json")
    result = service.top_sender()
    if result.ok:
        print(result.value)
"""

from .data.loader import load_transactions
from .schemas.transactions import Transaction
from .services.results import InsufficientDataError, QueryError, QueryResult
from .services.transaction_queries import TransactionQueryService

__all__ = [
    "InsufficientDataError",
    "QueryError",
    "QueryResult",
    "Transaction",
    "TransactionQueryService",
    "load_transactions",
]

__version__ = "0.1.0"
