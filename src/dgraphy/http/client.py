from __future__ import annotations

import logging
from json import dumps, loads
from typing import Any, Dict, Optional

import httpx

from dgraphy.base.client import BaseClient
from dgraphy.exception import DgraphyError, TransportError
from dgraphy.message import (
    Assigned,
    Mutation,
    Operation,
    Request,
    Response,
    TxnContext,
)

logger = logging.getLogger(__name__)

JSON_CONTENT = "application/json"
RDF_CONTENT = "application/rdf"


class HTTPClient(BaseClient):
    """Client for the HTTP endpoints of a Dgraph Alpha"""

    scheme = "http"

    def __init__(
        self,
        dsn: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(dsn=dsn, host=host, port=port, timeout=timeout)
        self._client = client
        self._owns_client = client is None

    async def open(self):
        """Open the underlying HTTP connection pool"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.dsn,
                timeout=self.timeout,
                headers={"Accept": JSON_CONTENT},
            )
            self._owns_client = True
        logger.info("Opened %s", self)

    async def close(self):
        """Close the underlying HTTP connection pool"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        logger.info("Closed %s", self)

    async def query(self, request: Request) -> Response:
        params: Dict[str, str] = {}
        if request.start_ts:
            params["startTs"] = str(request.start_ts)
        if request.read_only:
            params["ro"] = "true"
        if request.best_effort:
            params["be"] = "true"

        body = {"query": request.query, "variables": request.vars}
        payload = await self._post(
            "/query",
            params=params,
            content=dumps(body).encode(),
            content_type=JSON_CONTENT,
        )
        extensions = payload.get("extensions") or {}
        return Response(
            json=self._encode_data(payload.get("data")),
            txn=self._parse_context(extensions.get("txn")),
            latency=extensions.get("server_latency") or {},
        )

    async def mutate(self, mutation: Mutation) -> Assigned:
        if mutation.is_empty:
            raise DgraphyError("Mutation has nothing to set or delete")

        params: Dict[str, str] = {}
        if mutation.start_ts:
            params["startTs"] = str(mutation.start_ts)
        if mutation.commit_now:
            params["commitNow"] = "true"

        if mutation.is_json:
            content, content_type = self._json_mutation(mutation)
        else:
            content, content_type = self._rdf_mutation(mutation)

        payload = await self._post(
            "/mutate",
            params=params,
            content=content,
            content_type=content_type,
        )
        data = payload.get("data") or {}
        extensions = payload.get("extensions") or {}
        return Assigned(
            context=self._parse_context(extensions.get("txn")),
            uids=data.get("uids") or {},
        )

    async def commit_or_abort(self, context: TxnContext) -> None:
        params = {"startTs": str(context.start_ts)}
        if context.aborted:
            params["abort"] = "true"
        body = {"keys": context.keys, "preds": context.preds}
        await self._post(
            "/commit",
            params=params,
            content=dumps(body).encode(),
            content_type=JSON_CONTENT,
        )

    async def alter(self, operation: Operation) -> None:
        if operation.drop_all:
            content = dumps({"drop_all": True}).encode()
        elif operation.drop_attr:
            content = dumps({"drop_attr": operation.drop_attr}).encode()
        elif operation.schema:
            content = operation.schema.encode()
        else:
            raise DgraphyError("Operation has nothing to alter")
        await self._post("/alter", params={}, content=content)

    async def _post(
        self,
        path: str,
        *,
        params: Dict[str, str],
        content: bytes,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        if self._client is None:
            raise DgraphyError(f"{self} is not open. Call open() first")

        headers = {"Content-Type": content_type} if content_type else {}
        logger.debug("POST %s params=%s", path, params)
        try:
            response = await self._client.post(
                path, params=params, content=content, headers=headers
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON in response from {path}: {e}"
            ) from e

        if not isinstance(payload, dict):
            raise TransportError(
                f"Unexpected response from {path}: expected a JSON object, "
                f"got {type(payload).__name__}"
            )

        errors = payload.get("errors")
        if errors:
            message = "; ".join(
                str(
                    error.get("message", error)
                    if isinstance(error, dict)
                    else error
                )
                for error in errors
            )
            raise TransportError(f"Dgraph rejected {path}: {message}")
        return payload

    @staticmethod
    def _json_mutation(mutation: Mutation):
        body: Dict[str, Any] = {}
        try:
            if mutation.set_json:
                body["set"] = loads(mutation.set_json)
            if mutation.delete_json:
                body["delete"] = loads(mutation.delete_json)
        except ValueError as e:
            raise DgraphyError(
                f"Mutation JSON payload is invalid: {e}"
            ) from e
        return dumps(body).encode(), JSON_CONTENT

    @staticmethod
    def _rdf_mutation(mutation: Mutation):
        blocks = []
        if mutation.set_nquads:
            blocks.append(f"set {{ {mutation.set_nquads.decode()} }}")
        if mutation.del_nquads:
            blocks.append(f"delete {{ {mutation.del_nquads.decode()} }}")
        return f"{{ {' '.join(blocks)} }}".encode(), RDF_CONTENT

    @staticmethod
    def _encode_data(data: Any) -> bytes:
        return dumps(data).encode() if data is not None else b""

    @staticmethod
    def _parse_context(
        txn: Optional[Dict[str, Any]]
    ) -> Optional[TxnContext]:
        if txn is None:
            return None
        return TxnContext(
            start_ts=int(txn.get("start_ts", 0)),
            commit_ts=int(txn.get("commit_ts", 0)),
            aborted=bool(txn.get("aborted", False)),
            keys=list(txn.get("keys") or []),
            preds=list(txn.get("preds") or []),
        )


class HTTPSClient(HTTPClient):
    """Client for the HTTP endpoints of a Dgraph Alpha served over TLS"""

    scheme = "https"
