"""
Client side transactions for Dgraph.
Tracks the snapshot and conflict bookkeeping the server needs on commit.
"""

from .interfaces import (
    ConfigurationError,
    ConsistencyError,
    FinishedTransactionError,
    ProtocolError,
    ReadOnlyTransactionError,
    TransactionError,
    TransactionState,
)
from .txn import Transaction

__all__ = [
    "Transaction",
    "TransactionState",
    "TransactionError",
    "FinishedTransactionError",
    "ReadOnlyTransactionError",
    "ConfigurationError",
    "ProtocolError",
    "ConsistencyError",
]
