import pytest

from dgraphy.message import TxnContext
from dgraphy.transaction import ConsistencyError


def test_first_context_sets_start_ts(txn):
    txn._merge_context(TxnContext(start_ts=42, keys=["a"], preds=["p"]))

    assert txn.context.start_ts == 42
    assert txn.context.keys == ["a"]
    assert txn.context.preds == ["p"]


def test_keys_accumulate_in_order_with_duplicates(txn):
    txn._merge_context(TxnContext(start_ts=5, keys=["a", "b"], preds=["p"]))
    txn._merge_context(TxnContext(start_ts=5, keys=["b", "c"], preds=["p"]))

    assert txn.context.keys == ["a", "b", "b", "c"]
    assert txn.context.preds == ["p", "p"]


def test_same_set_of_keys_regardless_of_order(dgraph):
    first = TxnContext(start_ts=5, keys=["a"], preds=["p"])
    second = TxnContext(start_ts=5, keys=["b"], preds=["q"])

    one = dgraph.txn()
    one._merge_context(first)
    one._merge_context(second)

    other = dgraph.txn()
    other._merge_context(second)
    other._merge_context(first)

    assert sorted(one.context.keys) == sorted(other.context.keys)
    assert sorted(one.context.preds) == sorted(other.context.preds)


@pytest.mark.parametrize("first,second", ((42, 7), (7, 42)))
def test_mismatched_start_ts(txn, first, second):
    txn._merge_context(TxnContext(start_ts=first, keys=["a"]))

    with pytest.raises(
        ConsistencyError, match="inconsistent start timestamp"
    ):
        txn._merge_context(TxnContext(start_ts=second, keys=["b"]))

    assert txn.context.start_ts == first
    assert txn.context.keys == ["a"]


def test_merge_leaves_aborted_alone(txn):
    txn._merge_context(TxnContext(start_ts=3, aborted=True))
    assert not txn.context.aborted
