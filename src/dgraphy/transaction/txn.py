from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional
from uuid import uuid4

from dgraphy.message import Assigned, Mutation, Request, Response, TxnContext

from .interfaces import (
    ConfigurationError,
    ConsistencyError,
    FinishedTransactionError,
    ProtocolError,
    ReadOnlyTransactionError,
    TransactionState,
)

if TYPE_CHECKING:
    from dgraphy.base.client import BaseClient

logger = logging.getLogger(__name__)


class Transaction:
    """Optimistic, snapshot isolated transaction against Dgraph.

    The transaction collects the start timestamp and the conflict keys and
    predicates returned by the server, and forwards them on commit so that
    the server can detect conflicts. It must end with exactly one of
    `commit` or `discard`. Using it as an async context manager discards
    it on exit, which is a no-op after a commit.

    Example:

    ```python
    async with dgraph.txn() as txn:
        await txn.mutate(Mutation(set_json=b'{"name": "Alice"}'))
        await txn.commit()
    ```

    A transaction belongs to a single task. The client it holds is shared
    and is not closed by the transaction.
    """

    def __init__(
        self,
        client: BaseClient,
        read_only: bool = False,
        best_effort: bool = False,
    ) -> None:
        self.transaction_id = f"txn_{uuid4().hex[:8]}"
        self.context = TxnContext()
        self.finished = False
        self.mutated = False
        self._read_only = read_only
        self._best_effort = False
        self._client = client

        if best_effort:
            self.best_effort()

        logger.debug(
            "Transaction %s created (read_only=%s)",
            self.transaction_id,
            read_only,
        )

    def __str__(self) -> str:
        return (
            f"<Transaction {self.transaction_id} "
            f"{self.state.value} start_ts={self.context.start_ts}>"
        )

    @property
    def read_only(self) -> bool:
        return self._read_only

    @property
    def is_best_effort(self) -> bool:
        return self._best_effort

    @property
    def client(self) -> BaseClient:
        return self._client

    @property
    def state(self) -> TransactionState:
        if self.finished:
            return TransactionState.FINISHED
        return TransactionState.ACTIVE

    def best_effort(self) -> Transaction:
        """Enable best effort mode for a read-only transaction.

        The Alpha will try to serve timestamps from memory instead of
        asking Zero for each query. This may yield better latencies on
        read heavy datasets at the cost of slightly stale reads.

        Raises:
            FinishedTransactionError: If the transaction has finished
            ConfigurationError: If the transaction is not read-only

        Returns:
            Transaction: The transaction itself
        """
        if self.finished:
            raise FinishedTransactionError(
                f"Transaction {self.transaction_id} has already been "
                "committed or discarded"
            )
        if not self._read_only:
            raise ConfigurationError(
                "best effort only valid for read-only transactions"
            )
        self._best_effort = True
        return self

    async def query(self, query: str) -> Response:
        """Run a query inside the transaction"""
        return await self.query_with_vars(query, {})

    async def query_with_vars(
        self, query: str, vars: Optional[Dict[str, str]] = None
    ) -> Response:
        """Run a query with variables inside the transaction.

        Args:
            query (str): DQL query text
            vars (Dict[str, str], optional): Values for the query variables

        Raises:
            FinishedTransactionError: If the transaction has finished
            ProtocolError: If the response carries no transaction context

        Returns:
            Response: The server response, untouched
        """
        if self.finished:
            raise FinishedTransactionError(
                f"Transaction {self.transaction_id} has already been "
                "committed or discarded"
            )

        request = Request(
            query=query,
            vars=vars or {},
            start_ts=self.context.start_ts,
            read_only=self._read_only,
            best_effort=self._best_effort,
        )
        logger.debug("Querying in transaction %s", self.transaction_id)
        response = await self._client.query(request)

        if response.txn is None:
            raise ProtocolError("empty transaction context in query response")

        self._merge_context(response.txn)
        return response

    async def mutate(self, mutation: Mutation) -> Assigned:
        """Send a mutation inside the transaction.

        A failed mutation discards the transaction before the error is
        raised. A mutation with `commit_now` set finishes the transaction.

        Raises:
            FinishedTransactionError: If the transaction has finished
            ReadOnlyTransactionError: If the transaction is read-only
            ProtocolError: If the response carries no transaction context

        Returns:
            Assigned: The server response, untouched
        """
        self._check_writable()

        self.mutated = True
        mutation.start_ts = self.context.start_ts
        commit_now = mutation.commit_now

        logger.debug(
            "Mutating in transaction %s (commit_now=%s)",
            self.transaction_id,
            commit_now,
        )
        try:
            assigned = await self._client.mutate(mutation)
        except Exception as e:
            logger.error(
                "Mutation failed for %s, discarding: %s",
                self.transaction_id,
                e,
            )
            try:
                await self.discard()
            except Exception as discard_error:
                logger.error(
                    "Discard after failed mutation also failed for %s: %s",
                    self.transaction_id,
                    discard_error,
                )
            raise

        if commit_now:
            self.finished = True

        if assigned.context is None:
            raise ProtocolError(
                "missing transaction context on mutation response"
            )

        self._merge_context(assigned.context)
        return assigned

    async def commit(self) -> None:
        """Commit the transaction.

        Nothing is sent to the server if the transaction never mutated.
        The transaction is finished afterwards, even if the server call
        fails.

        Raises:
            FinishedTransactionError: If the transaction has finished
            ReadOnlyTransactionError: If the transaction is read-only
        """
        self._check_writable()
        await self._commit_or_abort()
        logger.info("Transaction %s committed", self.transaction_id)

    async def discard(self) -> None:
        """Discard the transaction. Safe to call any number of times."""
        self.context.aborted = True
        await self._commit_or_abort()

    async def _commit_or_abort(self) -> None:
        if self.finished:
            return
        self.finished = True

        if not self.mutated:
            return

        logger.debug(
            "Sending %s for transaction %s (start_ts=%d, keys=%d)",
            "abort" if self.context.aborted else "commit",
            self.transaction_id,
            self.context.start_ts,
            len(self.context.keys),
        )
        await self._client.commit_or_abort(self.context)

    def _check_writable(self) -> None:
        if self.finished:
            raise FinishedTransactionError(
                f"Transaction {self.transaction_id} has already been "
                "committed or discarded"
            )
        if self._read_only:
            raise ReadOnlyTransactionError(
                f"Transaction {self.transaction_id} is read-only"
            )

    def _merge_context(self, incoming: TxnContext) -> None:
        if self.context.start_ts == 0:
            self.context.start_ts = incoming.start_ts

        if self.context.start_ts != incoming.start_ts:
            raise ConsistencyError(
                "inconsistent start timestamp across operations: "
                f"{self.context.start_ts} != {incoming.start_ts}"
            )

        self.context.keys.extend(incoming.keys)
        self.context.preds.extend(incoming.preds)
        logger.debug(
            "Merged context into %s (start_ts=%d)",
            self.transaction_id,
            self.context.start_ts,
        )

    async def __aenter__(self) -> Transaction:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Discard on exit, unless already committed or discarded"""
        try:
            await self.discard()
        except Exception as e:
            logger.error(
                "Error discarding transaction %s on exit: %s",
                self.transaction_id,
                e,
            )

        return False
