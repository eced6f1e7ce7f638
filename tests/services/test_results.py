"""Tests for the tagged query result."""
from __future__ import annotations

from decimal import Decimal

import pytest

from txn_insights.services.results import QueryError, QueryResult
from txn_insights.services.transaction_queries import TransactionQueryService


def test_success_unwraps_to_its_value() -> None:
    result = QueryResult.success(Decimal("12.50"))

    assert result.ok
    assert result.error is None
    assert result.unwrap() == Decimal("12.50")
    assert result.unwrap_or(Decimal("-1")) == Decimal("12.50")


def test_failure_keeps_default_but_unwrap_or_prefers_caller_default() -> None:
    result = QueryResult.failure(Decimal(0), "No transactions available")

    assert not result.ok
    assert result.value == Decimal(0)
    assert result.unwrap_or(Decimal("-1")) == Decimal("-1")
    with pytest.raises(QueryError, match="No transactions available"):
        result.unwrap()


def test_unwrap_or_on_query_results() -> None:
    service = TransactionQueryService([])

    assert service.max_amount().unwrap_or(None) is None
    assert service.total_amount().unwrap_or(None) == Decimal(0)


def test_results_are_immutable() -> None:
    result = QueryResult.success(3)

    with pytest.raises(AttributeError):
        result.value = 4  # type: ignore[misc]
