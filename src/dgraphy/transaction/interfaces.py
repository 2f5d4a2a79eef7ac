from enum import Enum

from dgraphy.exception import DgraphyError


class TransactionState(Enum):
    """Transaction state machine states"""

    ACTIVE = "active"  # Accepting queries and mutations
    FINISHED = "finished"  # Committed or discarded, no further use


class TransactionError(DgraphyError):
    """Base exception for transaction errors"""

    pass


class FinishedTransactionError(TransactionError):
    """Raised when a transaction is used after commit or discard"""

    pass


class ReadOnlyTransactionError(TransactionError):
    """Raised when a read-only transaction is asked to write or commit"""

    pass


class ConfigurationError(TransactionError):
    """Raised when a transaction option does not fit the transaction"""

    pass


class ProtocolError(TransactionError):
    """Raised when a server response lacks the transaction context"""

    pass


class ConsistencyError(TransactionError):
    """Raised when the server reports a different snapshot mid-transaction"""

    pass
