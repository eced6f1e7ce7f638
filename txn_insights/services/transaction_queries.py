"""Read-only reporting queries over a loaded transaction collection."""
from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from decimal import Decimal
from functools import wraps
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, TypeVar

from txn_insights.core.config import get_settings
from txn_insights.core.logger import get_logger, log_context
from txn_insights.data.loader import load_transactions
from txn_insights.schemas.transactions import Transaction
from txn_insights.services.results import InsufficientDataError, QueryResult

LOGGER = get_logger(__name__)

TOP_TRANSACTIONS_COUNT = 3

F = TypeVar("F", bound=Callable[..., QueryResult[Any]])


def _guarded(message: str, default: Any) -> Callable[[F], F]:
    """Turn any exception raised by a query into a logged failure result.

    ``message`` may reference the query's parameters by name, e.g.
    ``"... sent by {sender_full_name}"``. ``default`` must be immutable since
    it is shared by every failure of the query.
    """

    def decorator(method: F) -> F:
        signature = inspect.signature(method)

        @wraps(method)
        def wrapper(self: "TransactionQueryService", *args: Any, **kwargs: Any) -> QueryResult[Any]:
            arguments = signature.bind(self, *args, **kwargs)
            arguments.apply_defaults()
            params = {k: v for k, v in arguments.arguments.items() if k != "self"}
            text = message.format(**params)
            with log_context.bound(query=method.__name__):
                try:
                    return method(self, *args, **kwargs)
                except InsufficientDataError as exc:
                    self._logger.error("%s: %s", text, exc)
                    return QueryResult.failure(default, f"{text}: {exc}")
                except Exception as exc:
                    self._logger.exception(text)
                    return QueryResult.failure(default, f"{text}: {exc}")

        return wrapper  # type: ignore[return-value]

    return decorator


class TransactionQueryService:
    """Aggregations and lookups over an immutable collection of transactions.

    The collection is captured once at construction and never mutated, so a
    single instance can be shared between readers. Every query recomputes its
    answer from the full collection.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._transactions: tuple[Transaction, ...] = tuple(transactions)
        self._logger = logger or LOGGER

    @classmethod
    def from_file(
        cls,
        path: str | Path | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> "TransactionQueryService":
        """Load ``path`` (the configured data file by default) and wrap it."""

        if path is None:
            path = get_settings().data.path
        return cls(load_transactions(path, logger=logger), logger=logger)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    def __len__(self) -> int:
        return len(self._transactions)

    # ------------------------------------------------------------------
    # Amounts
    # ------------------------------------------------------------------

    @_guarded("Error calculating total transaction amount", Decimal(0))
    def total_amount(self) -> QueryResult[Decimal]:
        """Sum of all amounts; zero for an empty collection."""
        return QueryResult.success(sum((t.amount for t in self._transactions), Decimal(0)))

    @_guarded("Error calculating total transaction amount sent by {sender_full_name}", Decimal(0))
    def total_amount_sent_by(self, sender_full_name: str) -> QueryResult[Decimal]:
        """Sum of amounts whose sender name matches exactly."""
        total = sum(
            (t.amount for t in self._transactions if t.sender_full_name == sender_full_name),
            Decimal(0),
        )
        return QueryResult.success(total)

    @_guarded("Error calculating max transaction amount", Decimal(0))
    def max_amount(self) -> QueryResult[Decimal]:
        if not self._transactions:
            raise InsufficientDataError("No transactions available")
        return QueryResult.success(max(t.amount for t in self._transactions))

    @_guarded("Error getting top {count} transactions by amount", ())
    def top_transactions_by_amount(
        self, count: int = TOP_TRANSACTIONS_COUNT
    ) -> QueryResult[tuple[Transaction, ...]]:
        """The ``count`` largest transactions, largest first.

        Equal amounts keep their input order. With fewer than ``count``
        transactions the query fails rather than returning a shorter list.
        """
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        if len(self._transactions) < count:
            raise InsufficientDataError(f"Insufficient transactions for top {count}")
        ranked = sorted(self._transactions, key=lambda t: t.amount, reverse=True)
        return QueryResult.success(tuple(ranked[:count]))

    @_guarded("Error getting top sender", None)
    def top_sender(self) -> QueryResult[str | None]:
        """Name of the sender with the greatest total sent.

        Ties go to the sender that appears first in the file. An empty
        collection has no top sender, which is not an error.
        """
        totals: dict[str, Decimal] = {}
        for t in self._transactions:
            totals[t.sender_full_name] = totals.get(t.sender_full_name, Decimal(0)) + t.amount

        leader: str | None = None
        best = Decimal(0)
        for name, total in totals.items():
            if leader is None or total > best:
                leader, best = name, total
        return QueryResult.success(leader)

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    @_guarded("Error counting unique clients", 0)
    def count_unique_clients(self) -> QueryResult[int]:
        """Distinct names seen as sender or beneficiary."""
        names: set[str] = set()
        for t in self._transactions:
            names.add(t.sender_full_name)
            names.add(t.beneficiary_full_name)
        return QueryResult.success(len(names))

    @_guarded("Error checking open compliance issues for {client_full_name}", False)
    def has_open_compliance_issues(self, client_full_name: str) -> QueryResult[bool]:
        return QueryResult.success(
            any(t.involves(client_full_name) and t.has_open_issue for t in self._transactions)
        )

    @_guarded("Error getting transactions by beneficiary name", MappingProxyType({}))
    def transactions_by_beneficiary(self) -> QueryResult[Mapping[str, Transaction]]:
        """One transaction per beneficiary; the last one in the file wins."""
        index = {t.beneficiary_full_name: t for t in self._transactions}
        return QueryResult.success(MappingProxyType(index))

    @_guarded("Error grouping transactions by beneficiary name", MappingProxyType({}))
    def transactions_grouped_by_beneficiary(
        self,
    ) -> QueryResult[Mapping[str, tuple[Transaction, ...]]]:
        """Every transaction per beneficiary, in file order."""
        groups: defaultdict[str, list[Transaction]] = defaultdict(list)
        for t in self._transactions:
            groups[t.beneficiary_full_name].append(t)
        return QueryResult.success(
            MappingProxyType({name: tuple(items) for name, items in groups.items()})
        )

    # ------------------------------------------------------------------
    # Compliance issues
    # ------------------------------------------------------------------

    @_guarded("Error getting unsolved issue ids", frozenset())
    def unsolved_issue_ids(self) -> QueryResult[frozenset[int]]:
        return QueryResult.success(
            frozenset(
                t.issue_id
                for t in self._transactions
                if not t.issue_solved and t.issue_id is not None
            )
        )

    @_guarded("Error getting all solved issue messages", ())
    def solved_issue_messages(self) -> QueryResult[tuple[str, ...]]:
        return QueryResult.success(
            tuple(
                t.issue_message
                for t in self._transactions
                if t.issue_solved and t.issue_message is not None
            )
        )


__all__ = ["TOP_TRANSACTIONS_COUNT", "TransactionQueryService"]
