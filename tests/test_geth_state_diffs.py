import pytest

from chainfreeze.geth_balance_diffs import GethBalanceDiffs
from chainfreeze.geth_code_diffs import GethCodeDiffs
from chainfreeze.geth_nonce_diffs import GethNonceDiffs
from chainfreeze.geth_state_diffs import (
    GethStateDiffs,
    process_geth_diffs,
    transform_balance_diffs,
    transform_code_diffs,
    transform_nonce_diffs,
    transform_storage_diffs,
)
from chainfreeze.geth_storage_diffs import GethStorageDiffs
from chainfreeze.records import AccountState, DiffMode
from chainfreeze.schema import CollectError, Datatype, Table

ADDR_A = b"\x0a" * 20
ADDR_B = b"\x0b" * 20
TX_1 = b"\x11" * 32
TX_2 = b"\x22" * 32
SLOT_1 = b"\x01" * 32
SLOT_2 = b"\x02" * 32
VALUE_1 = b"\x33" * 32
VALUE_2 = b"\x44" * 32


def _schemas(*classes):
    return {cls.DATATYPE: Table(cls.DATATYPE, cls.COLUMNS) for cls in classes}


def test_balance_diff_from_pre_to_post():
    trace = DiffMode(pre={ADDR_A: AccountState(balance=5)}, post={ADDR_A: AccountState(balance=7)})
    columns = GethBalanceDiffs()
    transform_balance_diffs((12, [TX_1], [trace]), columns, _schemas(GethBalanceDiffs))
    assert columns.n_rows == 1
    assert columns["from_value"] == [5]
    assert columns["to_value"] == [7]
    assert columns["block_number"] == [12]
    assert columns["transaction_hash"] == [TX_1]
    assert columns["address"] == [ADDR_A]


def test_missing_side_defaults_to_zero():
    trace = DiffMode(pre={}, post={ADDR_A: AccountState(balance=9, nonce=1)})
    balances, nonces = GethBalanceDiffs(), GethNonceDiffs()
    schemas = _schemas(GethBalanceDiffs, GethNonceDiffs)
    transform_balance_diffs((1, [None], [trace]), balances, schemas)
    transform_nonce_diffs((1, [None], [trace]), nonces, schemas)
    assert balances["from_value"] == [0]
    assert balances["to_value"] == [9]
    assert nonces["from_value"] == [0]
    assert nonces["to_value"] == [1]


def test_addresses_are_processed_in_sorted_order():
    trace = DiffMode(
        pre={ADDR_B: AccountState(balance=1)},
        post={ADDR_A: AccountState(balance=2), ADDR_B: AccountState(balance=3)},
    )
    columns = GethBalanceDiffs()
    transform_balance_diffs((1, [TX_1], [trace]), columns, _schemas(GethBalanceDiffs))
    assert columns["address"] == sorted([ADDR_A, ADDR_B])
    assert columns.n_rows == 2


def test_transaction_index_follows_trace_position():
    traces = [
        DiffMode(pre={ADDR_A: AccountState(balance=1)}),
        DiffMode(pre={ADDR_B: AccountState(balance=2)}),
    ]
    columns = GethBalanceDiffs()
    transform_balance_diffs((3, [TX_1, TX_2], traces), columns, _schemas(GethBalanceDiffs))
    assert columns["transaction_index"] == [0, 1]
    assert columns["transaction_hash"] == [TX_1, TX_2]


def test_code_is_decoded_from_prefixed_hex():
    trace = DiffMode(pre={ADDR_A: AccountState(code="0x6001")}, post={})
    columns = GethCodeDiffs()
    transform_code_diffs((1, [TX_1], [trace]), columns, _schemas(GethCodeDiffs))
    assert columns["from_value"] == [bytes.fromhex("6001")]
    assert columns["to_value"] == [b""]


def test_code_without_prefix_raises():
    trace = DiffMode(pre={}, post={ADDR_A: AccountState(code="6001")})
    with pytest.raises(CollectError):
        transform_code_diffs((1, [TX_1], [trace]), GethCodeDiffs(), _schemas(GethCodeDiffs))


def test_storage_slots_union_with_zero_for_missing():
    trace = DiffMode(
        pre={ADDR_A: AccountState(storage={SLOT_2: VALUE_2})},
        post={ADDR_A: AccountState(storage={SLOT_1: VALUE_1})},
    )
    columns = GethStorageDiffs()
    transform_storage_diffs((1, [TX_1], [trace]), columns, _schemas(GethStorageDiffs))
    assert columns["slot"] == [SLOT_1, SLOT_2]
    assert columns["from_value"] == [bytes(32), VALUE_2]
    assert columns["to_value"] == [VALUE_1, bytes(32)]


def test_dataset_without_schema_is_skipped():
    trace = DiffMode(pre={ADDR_A: AccountState(balance=1)})
    columns = GethBalanceDiffs()
    process_geth_diffs((1, [TX_1], [trace]), columns, None, None, None, {})
    assert columns.n_rows == 0


def test_state_diffs_fill_all_and_export():
    trace = DiffMode(
        pre={ADDR_A: AccountState(balance=1, nonce=2, code="0x", storage={SLOT_1: VALUE_1})},
        post={ADDR_A: AccountState(balance=3, nonce=4, code="0x00", storage={SLOT_1: VALUE_2})},
    )
    schemas = _schemas(GethBalanceDiffs, GethCodeDiffs, GethNonceDiffs, GethStorageDiffs)
    diffs = GethStateDiffs()
    diffs.transform((8, [TX_1], [trace]), schemas)
    output = diffs.to_columns(schemas, 1)
    assert set(output) == set(schemas)
    assert output[Datatype.GETH_NONCE_DIFFS]["to_value"] == [4]
    assert output[Datatype.GETH_CODE_DIFFS]["to_value"] == [b"\x00"]
    assert output[Datatype.GETH_STORAGE_DIFFS]["to_value"] == [VALUE_2]
    assert all(table["chain_id"] == [1] for table in output.values())


def test_state_diffs_leave_out_absent_datasets():
    schemas = _schemas(GethBalanceDiffs)
    diffs = GethStateDiffs(code_diffs=None, nonce_diffs=None, storage_diffs=None)
    diffs.transform((1, [TX_1], [DiffMode(pre={ADDR_A: AccountState(balance=1)})]), schemas)
    output = diffs.to_columns(schemas, 1)
    assert list(output) == [Datatype.GETH_BALANCE_DIFFS]
    assert output[Datatype.GETH_BALANCE_DIFFS]["from_value"] == [1]