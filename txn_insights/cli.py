#!/usr/bin/env python3
"""Run reporting queries against a transaction file from the command line."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.table import Table

from txn_insights.core.config import get_settings
from txn_insights.core.formatting import format_amount, humanize_currency
from txn_insights.core.logger import get_logger, init_logging, set_level
from txn_insights.schemas.transactions import Transaction
from txn_insights.services.results import QueryResult
from txn_insights.services.transaction_queries import (
    TOP_TRANSACTIONS_COUNT,
    TransactionQueryService,
)

logger = get_logger(__name__)

Handler = Callable[[TransactionQueryService, argparse.Namespace, "_Output"], int]


class _Output:
    """Stdout for answers, stderr for failures."""

    def __init__(self, currency_symbol: str) -> None:
        self.out = Console(highlight=False)
        self.err = Console(stderr=True, highlight=False)
        self.currency_symbol = currency_symbol

    def line(self, text: object) -> None:
        self.out.print(str(text), markup=False)

    def amount(self, value: object) -> str:
        return format_amount(value, self.currency_symbol)  # type: ignore[arg-type]

    def emit(self, result: QueryResult, render: Callable[[object], None]) -> int:
        if not result.ok:
            self.err.print(f"error: {result.error}", markup=False)
            return 1
        render(result.value)
        return 0


def _issue_label(txn: Transaction) -> str:
    if txn.issue_id is None:
        return ""
    return f"#{txn.issue_id} {'solved' if txn.issue_solved else 'open'}"


def _transaction_table(
    title: str,
    key_column: str,
    rows: Sequence[tuple[str, Transaction]],
    out: _Output,
) -> Table:
    """Rows are ``(key, transaction)``; the key fills the first column."""
    table = Table(title=title)
    table.add_column(key_column)
    table.add_column("Sender")
    table.add_column("Beneficiary")
    table.add_column("Amount", justify="right")
    table.add_column("Issue")
    for key, txn in rows:
        table.add_row(
            key,
            txn.sender_full_name,
            txn.beneficiary_full_name,
            out.amount(txn.amount),
            _issue_label(txn),
        )
    return table


def _summary(service: TransactionQueryService, _args: argparse.Namespace, out: _Output) -> int:
    def show(result: QueryResult, fmt: Callable[[object], str] = str) -> str:
        if not result.ok or result.value is None:
            return "n/a"
        return fmt(result.value)

    currency = lambda value: humanize_currency(value, symbol=out.currency_symbol, short=True)  # noqa: E731

    table = Table(title="Transaction summary", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Transactions", f"{len(service):,}")
    table.add_row("Total amount", show(service.total_amount(), currency))
    table.add_row("Largest transaction", show(service.max_amount(), currency))
    table.add_row("Unique clients", show(service.count_unique_clients()))
    table.add_row("Top sender", show(service.top_sender()))
    table.add_row("Open issues", show(service.unsolved_issue_ids(), lambda ids: str(len(ids))))  # type: ignore[arg-type]
    out.out.print(table)
    return 0


def _total(service: TransactionQueryService, args: argparse.Namespace, out: _Output) -> int:
    if args.sender is None:
        result = service.total_amount()
    else:
        result = service.total_amount_sent_by(args.sender)
    return out.emit(result, lambda value: out.line(out.amount(value)))


def _max(service: TransactionQueryService, _args: argparse.Namespace, out: _Output) -> int:
    return out.emit(service.max_amount(), lambda value: out.line(out.amount(value)))


def _clients(service: TransactionQueryService, _args: argparse.Namespace, out: _Output) -> int:
    return out.emit(service.count_unique_clients(), out.line)


def _open_issues(service: TransactionQueryService, args: argparse.Namespace, out: _Output) -> int:
    result = service.has_open_compliance_issues(args.client)
    return out.emit(result, lambda value: out.line("yes" if value else "no"))


def _by_beneficiary(service: TransactionQueryService, args: argparse.Namespace, out: _Output) -> int:
    if args.grouped:
        result = service.transactions_grouped_by_beneficiary()

        def render(groups: object) -> None:
            rows = [(name, txn) for name, txns in groups.items() for txn in txns]  # type: ignore[attr-defined]
            out.out.print(_transaction_table("Transactions by beneficiary", "Beneficiary", rows, out))

    else:
        result = service.transactions_by_beneficiary()

        def render(index: object) -> None:
            rows = list(index.items())  # type: ignore[attr-defined]
            out.out.print(_transaction_table("Latest transaction by beneficiary", "Beneficiary", rows, out))

    return out.emit(result, render)


def _unsolved_issues(service: TransactionQueryService, _args: argparse.Namespace, out: _Output) -> int:
    def render(ids: object) -> None:
        for issue_id in sorted(ids):  # type: ignore[call-overload]
            out.line(issue_id)

    return out.emit(service.unsolved_issue_ids(), render)


def _solved_messages(service: TransactionQueryService, _args: argparse.Namespace, out: _Output) -> int:
    def render(messages: object) -> None:
        for message in messages:  # type: ignore[attr-defined]
            out.line(message)

    return out.emit(service.solved_issue_messages(), render)


def _top(service: TransactionQueryService, args: argparse.Namespace, out: _Output) -> int:
    def render(ranked: object) -> None:
        rows = [(str(rank), txn) for rank, txn in enumerate(ranked, start=1)]  # type: ignore[arg-type]
        out.out.print(_transaction_table(f"Top {args.count} transactions by amount", "#", rows, out))

    return out.emit(service.top_transactions_by_amount(args.count), render)


def _top_sender(service: TransactionQueryService, _args: argparse.Namespace, out: _Output) -> int:
    return out.emit(service.top_sender(), lambda name: out.line(name if name is not None else "(none)"))


COMMANDS: dict[str, tuple[Handler, str]] = {
    "summary": (_summary, "Overview of the whole file"),
    "total": (_total, "Total amount, optionally for one sender"),
    "max": (_max, "Largest single transaction amount"),
    "clients": (_clients, "Number of distinct senders and beneficiaries"),
    "open-issues": (_open_issues, "Whether a client has unsolved compliance issues"),
    "by-beneficiary": (_by_beneficiary, "Transactions indexed by beneficiary name"),
    "unsolved-issues": (_unsolved_issues, "Ids of unsolved compliance issues"),
    "solved-messages": (_solved_messages, "Messages of solved compliance issues"),
    "top": (_top, "Largest transactions by amount"),
    "top-sender": (_top_sender, "Sender with the greatest total sent"),
}


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="txn-insights", description=__doc__)
    parser.add_argument("--data-file", type=Path, default=None, help="Transaction JSON file (defaults to TXN_INSIGHTS_DATA_FILE)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level, e.g. DEBUG or WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, (_handler, help_text) in COMMANDS.items():
        command = sub.add_parser(name, help=help_text)
        if name == "total":
            command.add_argument("--sender", type=str, default=None, help="Exact sender full name")
        elif name == "open-issues":
            command.add_argument("client", type=str, help="Exact client full name")
        elif name == "by-beneficiary":
            command.add_argument("--grouped", action="store_true", help="List every transaction, not only the last one")
        elif name == "top":
            command.add_argument("--count", type=_positive_int, default=TOP_TRANSACTIONS_COUNT, help="How many transactions to list")

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    init_logging(**settings.logging.as_kwargs())
    if args.log_level:
        set_level(args.log_level)

    data_file = args.data_file or settings.data.path
    logger.debug("Running %s against %s", args.command, data_file)
    service = TransactionQueryService.from_file(data_file)

    handler, _help = COMMANDS[args.command]
    return handler(service, args, _Output(settings.data.currency_symbol))


if __name__ == "__main__":
    raise SystemExit(main())
