from __future__ import annotations

from contextlib import asynccontextmanager
from logging import Logger, getLogger
from typing import Optional

from dgraphy.base.client import BaseClient
from dgraphy.dgraph import Dgraph
from dgraphy.exception import DgraphyError

try:
    from starlette.applications import Starlette

    STARLETTE_INSTALLED = True
except ModuleNotFoundError:
    STARLETTE_INSTALLED = False
    Starlette = type("Starlette", (), {})  # type: ignore


class StarletteDgraphExtension:
    def __init__(
        self,
        *,
        dsn: str = "",
        client: Optional[BaseClient] = None,
        timeout: Optional[float] = None,
        app: Optional[Starlette] = None,
    ):
        if not STARLETTE_INSTALLED:
            raise DgraphyError(
                "Could not locate Starlette. It must be installed to use "
                "StarletteDgraphExtension. Try: pip install starlette"
            )
        self.dgraph = Dgraph(dsn=dsn, client=client, timeout=timeout)
        if app is not None:
            self.init_app(app)

    def init_app(
        self, app: Starlette, logger: Optional[Logger] = None
    ) -> None:
        if logger is None:
            logger = getLogger("dgraphy")

        inner_lifespan = app.router.lifespan_context

        @asynccontextmanager
        async def lifespan(lifespan_app):
            await self.dgraph.connect()
            logger.info("Dgraph client ready: %s", self.dgraph.client)
            try:
                async with inner_lifespan(lifespan_app) as state:
                    yield state
            finally:
                await self.dgraph.disconnect()

        app.router.lifespan_context = lifespan
        app.state.dgraph = self.dgraph
