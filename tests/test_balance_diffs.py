import pytest

from chainfreeze.balance_diffs import (
    BalanceDiffs,
    process_balance_diff,
    process_balance_diffs,
)
from chainfreeze.records import AccountDiff, BlockTrace, Diff
from chainfreeze.schema import CollectError, Datatype, Table

ADDR_A = b"\x0a" * 20
ADDR_B = b"\x0b" * 20
TX_1 = b"\x01" * 32
TX_2 = b"\x02" * 32


def schemas():
    return {Datatype.BALANCE_DIFFS: Table(Datatype.BALANCE_DIFFS, BalanceDiffs.COLUMNS)}


def test_born_died_changed_and_same():
    response = (
        12,
        [TX_1, TX_2],
        [
            BlockTrace(
                state_diff={
                    ADDR_B: AccountDiff(balance=Diff.born(7)),
                    ADDR_A: AccountDiff(balance=Diff.changed(3, 9)),
                }
            ),
            BlockTrace(
                state_diff={
                    ADDR_A: AccountDiff(balance=Diff.died(4)),
                    ADDR_B: AccountDiff(balance=Diff.same()),
                }
            ),
        ],
    )
    columns = BalanceDiffs()
    process_balance_diffs(response, columns, schemas())
    assert columns.n_rows == 3
    assert columns["address"] == [ADDR_A, ADDR_B, ADDR_A]
    assert columns["from_value"] == [3, 0, 4]
    assert columns["to_value"] == [9, 7, 0]
    assert columns["transaction_index"] == [0, 0, 1]
    assert columns["transaction_hash"] == [TX_1, TX_1, TX_2]
    assert columns["block_number"] == [12, 12, 12]


def test_trace_without_state_diff_adds_nothing():
    columns = BalanceDiffs()
    process_balance_diffs((1, [TX_1], [BlockTrace()]), columns, schemas())
    assert len(columns) == 0
    assert columns["address"] == []


def test_traces_are_paired_with_transactions():
    diff = {ADDR_A: AccountDiff(balance=Diff.born(1))}
    response = (1, [None], [BlockTrace(state_diff=diff), BlockTrace(state_diff=diff)])
    columns = BalanceDiffs()
    process_balance_diffs(response, columns, schemas())
    assert columns.n_rows == 1
    assert columns["transaction_hash"] == [None]


def test_missing_schema_raises():
    with pytest.raises(CollectError):
        process_balance_diffs((1, [], []), BalanceDiffs(), {})


def test_single_diff_respects_schema_columns():
    schema = Table(Datatype.BALANCE_DIFFS, ("address", "to_value"))
    columns = BalanceDiffs()
    process_balance_diff(ADDR_A, Diff.changed(1, 2), None, None, 5, columns, schema)
    assert columns["to_value"] == [2]
    assert columns["from_value"] == []
    assert columns.n_rows == 1


def test_to_columns_adds_chain_id():
    columns = BalanceDiffs()
    diff = {ADDR_A: AccountDiff(balance=Diff.born(1))}
    process_balance_diffs((1, [TX_1], [BlockTrace(state_diff=diff)]), columns, schemas())
    output = columns.to_columns(schemas(), 1)[Datatype.BALANCE_DIFFS]
    assert output["chain_id"] == [1]
    assert list(output) == list(BalanceDiffs.COLUMNS)