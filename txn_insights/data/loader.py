"""Read the transaction file into an immutable, typed collection."""
from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from txn_insights.core.logger import get_logger, log_context, timeit
from txn_insights.schemas.transactions import Transaction, TransactionList

LOGGER = get_logger(__name__)


def load_transactions(
    path: str | Path,
    *,
    logger: logging.Logger | None = None,
) -> tuple[Transaction, ...]:
    """Load every record in ``path`` or none at all.

    An unusable path, a missing or unreadable file, malformed JSON or a
    single invalid record is logged and yields an empty tuple instead of an
    exception.
    """

    log = logger or LOGGER
    source = Path(path)

    with log_context.bound(source=source.name):
        try:
            # resolve() raises ValueError for paths with embedded NUL bytes
            source = source.resolve()
            log.info("Loading transactions from %s", source)
            with timeit("Transaction load", logger=log, unit="transactions") as timer:
                transactions = tuple(TransactionList.validate_json(source.read_bytes()))
                timer.set_total(len(transactions))
        except (OSError, ValidationError, ValueError):
            log.exception("Error loading transactions from JSON file %s", source)
            return ()

    return transactions
