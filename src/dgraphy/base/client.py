from __future__ import annotations

from abc import ABC, abstractmethod
from collections import namedtuple
from typing import List, Optional, Type
from urllib.parse import urlparse

from dgraphy.exception import DgraphyError
from dgraphy.message import (
    Assigned,
    Mutation,
    Operation,
    Request,
    Response,
    TxnContext,
)

UrlMapping = namedtuple("UrlMapping", ("key", "cast"))

DEFAULT_PORT = 8080

URLPARSE_MAPPING = {
    "hostname": UrlMapping("_host", str),
    "port": UrlMapping("_port", int),
}


class BaseClient(ABC):
    """Contract a transaction relies on to reach a Dgraph Alpha.

    A single client may be shared by any number of concurrent
    transactions. It never holds per-transaction state.
    """

    scheme = "dummy"
    registered_clients: List[Type[BaseClient]] = []

    def __init_subclass__(cls) -> None:
        BaseClient.registered_clients.append(cls)

    @abstractmethod
    async def open(self): ...

    @abstractmethod
    async def close(self): ...

    @abstractmethod
    async def query(self, request: Request) -> Response: ...

    @abstractmethod
    async def mutate(self, mutation: Mutation) -> Assigned: ...

    @abstractmethod
    async def commit_or_abort(self, context: TxnContext) -> None: ...

    @abstractmethod
    async def alter(self, operation: Operation) -> None: ...

    def __init__(
        self,
        dsn: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Client initialization.

        Args:
            dsn (str, optional): Alpha address, eg `http://localhost:8080`
            host (str, optional): Alpha address URL or IP
            port (int, optional): Alpha port. Defaults to 8080
            timeout (float, optional): Seconds before a single call fails.
                Defaults to `None` (no timeout)
        """

        if dsn and host:
            raise DgraphyError("Cannot connect to Dgraph using host and dsn")

        if not dsn:
            if port and (
                not isinstance(port, int) or port not in range(0, 65536)
            ):
                raise DgraphyError(
                    "port: must be an integer between 0 and 65535"
                )

            if host is not None and (
                not isinstance(host, str) or not len(host) > 0
            ):
                raise DgraphyError(
                    "host: must be a string at least 1 character long"
                )

        if timeout is not None and timeout <= 0:
            raise DgraphyError("timeout: must be a positive number")

        self._dsn = dsn
        self._host = host
        self._port = port
        self._timeout = timeout

        self._populate_connection_args()
        self._populate_dsn()

    def __str__(self) -> str:
        return f"<{self.__class__.__name__} {self.dsn}>"

    def _populate_connection_args(self):
        dsn = self.dsn or ""
        parts = urlparse(dsn) if dsn else None
        defaults = {"hostname": "localhost", "port": DEFAULT_PORT}
        for key, mapping in URLPARSE_MAPPING.items():
            if not getattr(self, mapping.key):
                value = getattr(parts, key, None) if parts else None
                if value is None:
                    value = defaults.get(key)
                setattr(self, mapping.key, mapping.cast(value))

    def _populate_dsn(self):
        self._dsn = f"{self.scheme}://{self.host}:{self.port}"

    @property
    def dsn(self):
        return self._dsn

    @property
    def host(self):
        return self._host

    @property
    def port(self):
        return self._port

    @property
    def timeout(self):
        return self._timeout
