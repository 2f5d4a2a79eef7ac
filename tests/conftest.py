from unittest.mock import AsyncMock

import pytest

from dgraphy import Dgraph
from dgraphy.base.client import BaseClient
from dgraphy.message import Assigned, Response, TxnContext


@pytest.fixture
def client():
    client = AsyncMock(spec=BaseClient)
    client.query.return_value = Response(
        json=b'{"q": []}', txn=TxnContext(start_ts=42)
    )
    client.mutate.return_value = Assigned(
        context=TxnContext(start_ts=42, keys=["k1"], preds=["1-name"]),
        uids={"alice": "0x1"},
    )
    client.commit_or_abort.return_value = None
    return client


@pytest.fixture
def dgraph(client):
    return Dgraph(client=client)


@pytest.fixture
def txn(dgraph):
    return dgraph.txn()


@pytest.fixture
def read_only_txn(dgraph):
    return dgraph.read_only_txn()
