"""Transaction file loading."""
from .loader import load_transactions

__all__ = ["load_transactions"]
