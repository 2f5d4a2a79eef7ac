import logging
from typing import Optional, Type
from urllib.parse import urlparse

from dgraphy.base.client import BaseClient
from dgraphy.exception import DgraphyError
from dgraphy.http.client import HTTPClient
from dgraphy.message import Operation
from dgraphy.transaction import Transaction

logger = logging.getLogger(__name__)

DEFAULT_CLIENT = HTTPClient


class Dgraph:
    """Main entryway for talking to a Dgraph cluster.

    Example:

    ```python
    async def run():
        async with Dgraph(dsn="http://localhost:8080") as dgraph:
            async with dgraph.txn() as txn:
                await txn.mutate(Mutation(set_json=b'{"name": "Alice"}'))
                await txn.commit()
    ```
    """

    def __init__(
        self,
        *,
        dsn: str = "",
        client: Optional[BaseClient] = None,
        timeout: Optional[float] = None,
    ):
        """Initializer for Dgraph instance

        The `dsn` and the `client` are mutually exclusive. When a `dsn` is
        passed, its scheme selects which registered client type is built.
        If several client types share a scheme, the one defined last is
        used. Unknown schemes fall back to the HTTP client.

        Args:
            dsn (str, optional): Address of an Alpha. Defaults to `""`.
            client (BaseClient, optional): Ready made client. Defaults to
                `None`.
            timeout (float, optional): Seconds before a single call fails.
                Only used together with `dsn`. Defaults to `None`.

        Raises:
            DgraphyError: If there is conflicting or missing client source
        """
        if client and dsn:
            raise DgraphyError("Conflict with client and DSN")

        if not client:
            if not dsn:
                raise DgraphyError("Either a client or a DSN is required")
            client_type = self._get_client_type(dsn)
            client = client_type(dsn, timeout=timeout)

        self._client = client

    @property
    def client(self) -> BaseClient:
        return self._client

    def _get_client_type(self, dsn: str) -> Type[BaseClient]:
        parts = urlparse(dsn)

        # Latest registration wins when subclasses share a scheme
        for client_type in reversed(BaseClient.registered_clients):
            if parts.scheme == client_type.scheme:
                return client_type
        return DEFAULT_CLIENT

    async def connect(self) -> None:
        """Open the client"""
        await self._client.open()
        logger.info("Connected to %s", self._client)

    async def disconnect(self) -> None:
        """Close the client"""
        await self._client.close()
        logger.info("Disconnected from %s", self._client)

    def txn(
        self, read_only: bool = False, best_effort: bool = False
    ) -> Transaction:
        """Create a new transaction

        Args:
            read_only (bool, optional): Whether the transaction may only
                query. Defaults to `False`.
            best_effort (bool, optional): Whether read-only queries may be
                served from an Alpha's cached timestamp. Defaults to `False`.

        Raises:
            ConfigurationError: If best effort is asked for a read-write
                transaction

        Returns:
            Transaction: A fresh, unfinished transaction
        """
        return Transaction(
            self._client, read_only=read_only, best_effort=best_effort
        )

    def read_only_txn(self, best_effort: bool = False) -> Transaction:
        """Create a new read-only transaction"""
        return self.txn(read_only=True, best_effort=best_effort)

    async def alter(self, operation: Operation) -> None:
        """Change the schema or drop data outside of any transaction"""
        logger.debug("Altering schema through %s", self._client)
        await self._client.alter(operation)

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
        return False
