import pytest

from chainfreeze.balance_reads import BalanceReads, process_balance_read, process_balance_reads
from chainfreeze.records import AccountState
from chainfreeze.schema import CollectError, Datatype, Table

ADDR_A = b"\x01" * 20
ADDR_B = b"\x02" * 20
TX0 = b"\xaa" * 32
TX1 = b"\xbb" * 32


def _schemas(columns=BalanceReads.COLUMNS):
    return {Datatype.BALANCE_READS: Table(Datatype.BALANCE_READS, columns)}


def test_rows_only_for_known_balances_in_address_order():
    response = (
        7,
        [TX0],
        [{ADDR_B: AccountState(balance=5), ADDR_A: AccountState(balance=9), b"\x03" * 20: AccountState()}],
    )
    columns = BalanceReads()
    process_balance_reads(response, columns, _schemas())
    assert len(columns) == 2
    assert columns["address"] == [ADDR_A, ADDR_B]
    assert columns["balance"] == [9, 5]
    assert columns["block_number"] == [7, 7]
    assert columns["transaction_hash"] == [TX0, TX0]


def test_transaction_index_follows_trace_position():
    response = (
        None,
        [TX0, TX1],
        [{ADDR_A: AccountState(balance=1)}, {ADDR_A: AccountState(balance=2)}],
    )
    columns = BalanceReads()
    process_balance_reads(response, columns, _schemas())
    assert columns["transaction_index"] == [0, 1]
    assert columns["transaction_hash"] == [TX0, TX1]
    assert columns["block_number"] == [None, None]


def test_traces_without_transaction_are_ignored():
    response = (1, [None], [{ADDR_A: AccountState(balance=1)}, {ADDR_B: AccountState(balance=2)}])
    columns = BalanceReads()
    process_balance_reads(response, columns, _schemas())
    assert columns["address"] == [ADDR_A]
    assert columns["transaction_hash"] == [None]


def test_missing_schema_raises():
    with pytest.raises(CollectError):
        process_balance_reads((1, [TX0], [{}]), BalanceReads(), {})


def test_single_read_without_balance_adds_nothing():
    columns = BalanceReads()
    schema = _schemas()[Datatype.BALANCE_READS]
    process_balance_read(ADDR_A, AccountState(nonce=3), 1, TX0, 0, columns, schema)
    assert len(columns) == 0
    assert columns["address"] == []


def test_to_columns_fills_chain_id_and_respects_schema():
    schemas = _schemas(("address", "balance", "chain_id"))
    columns = BalanceReads()
    process_balance_reads((1, [TX0], [{ADDR_A: AccountState(balance=4)}]), columns, schemas)
    output = columns.to_columns(schemas, 1)[Datatype.BALANCE_READS]
    assert list(output) == ["address", "balance", "chain_id"]
    assert output["chain_id"] == [1]
    assert columns["block_number"] == []