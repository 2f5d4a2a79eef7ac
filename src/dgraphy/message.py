"""
Value types exchanged between a transaction and its client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from json import loads
from typing import Any, Dict, List, Optional


@dataclass
class TxnContext:
    """Bookkeeping the server needs to commit or abort a transaction.

    A `start_ts` of 0 means the snapshot has not been assigned yet.
    """

    start_ts: int = 0
    commit_ts: int = 0
    aborted: bool = False
    keys: List[str] = field(default_factory=list)
    preds: List[str] = field(default_factory=list)


@dataclass
class Request:
    query: str
    vars: Dict[str, str] = field(default_factory=dict)
    start_ts: int = 0
    read_only: bool = False
    best_effort: bool = False


@dataclass
class Response:
    json: bytes = b""
    txn: Optional[TxnContext] = None
    latency: Dict[str, int] = field(default_factory=dict)

    def data(self) -> Any:
        """Decode the JSON payload of the response"""
        return loads(self.json) if self.json else None


@dataclass
class Mutation:
    set_json: bytes = b""
    delete_json: bytes = b""
    set_nquads: bytes = b""
    del_nquads: bytes = b""
    start_ts: int = 0
    commit_now: bool = False

    @property
    def is_json(self) -> bool:
        return bool(self.set_json or self.delete_json)

    @property
    def is_empty(self) -> bool:
        return not (
            self.set_json
            or self.delete_json
            or self.set_nquads
            or self.del_nquads
        )


@dataclass
class Assigned:
    context: Optional[TxnContext] = None
    uids: Dict[str, str] = field(default_factory=dict)


@dataclass
class Operation:
    """Schema alteration sent outside of any transaction"""

    schema: str = ""
    drop_attr: str = ""
    drop_all: bool = False
