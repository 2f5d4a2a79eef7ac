from importlib.metadata import version

from .base.client import BaseClient
from .dgraph import Dgraph
from .exception import DgraphyError, TransportError
from .http.client import HTTPClient, HTTPSClient
from .message import (
    Assigned,
    Mutation,
    Operation,
    Request,
    Response,
    TxnContext,
)
from .transaction import (
    ConfigurationError,
    ConsistencyError,
    FinishedTransactionError,
    ProtocolError,
    ReadOnlyTransactionError,
    Transaction,
    TransactionError,
)

__version__ = version("dgraphy")

__all__ = (
    "Assigned",
    "BaseClient",
    "ConfigurationError",
    "ConsistencyError",
    "Dgraph",
    "DgraphyError",
    "FinishedTransactionError",
    "HTTPClient",
    "HTTPSClient",
    "Mutation",
    "Operation",
    "ProtocolError",
    "ReadOnlyTransactionError",
    "Request",
    "Response",
    "Transaction",
    "TransactionError",
    "TransportError",
    "TxnContext",
)
