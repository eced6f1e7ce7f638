"""Pydantic schemas for transaction records."""

from .transactions import Transaction, TransactionList

__all__ = ["Transaction", "TransactionList"]
