import pytest

from chainfreeze.records import Block, Transaction, TransactionReceipt
from chainfreeze.schema import CollectError, Datatype, Table
from chainfreeze.transactions import (
    Transactions,
    filter_transactions,
    process_transaction,
    transform_block_response,
    tx_success,
)

ALICE = b"\xaa" * 20
BOB = b"\xbb" * 20
CAROL = b"\xcc" * 20


def full_schema():
    return Table(Datatype.TRANSACTIONS, Transactions.COLUMNS)


def make_tx(n=1, **kwargs):
    defaults = dict(
        hash=bytes([n]) * 32,
        from_address=ALICE,
        to_address=BOB,
        block_number=20_000_000,
        chain_id=1,
    )
    defaults.update(kwargs)
    return Transaction(**defaults)


def test_filter_by_sender_and_recipient():
    txs = [
        make_tx(1, from_address=ALICE, to_address=BOB),
        make_tx(2, from_address=BOB, to_address=ALICE),
        make_tx(3, from_address=ALICE, to_address=None),
        make_tx(4, from_address=ALICE, to_address=CAROL),
    ]
    assert [t.hash[0] for t in filter_transactions(txs, ALICE, None)] == [1, 3, 4]
    assert [t.hash[0] for t in filter_transactions(txs, None, ALICE)] == [2]
    assert [t.hash[0] for t in filter_transactions(txs, ALICE, BOB)] == [1]
    assert filter_transactions(txs, None, None) == txs


def test_process_transaction_stores_fields():
    columns = Transactions()
    tx = make_tx(input=b"\x00\x01\x00\x02", value=7, nonce=3, rlp=b"abc", block_hash=b"\x09" * 32)
    receipt = TransactionReceipt(transaction_hash=tx.hash, status=1, gas_used=21000)
    process_transaction(tx, receipt, columns, full_schema(), False, 1234)
    assert len(columns) == 1
    assert columns["success"] == [True]
    assert columns["gas_used"] == [21000]
    assert columns["timestamp"] == [1234]
    assert columns["value"] == [7]
    assert columns["nonce"] == [3]
    assert columns["n_rlp_bytes"] == [3]
    assert columns["n_input_bytes"] == [4]
    assert columns["n_input_zero_bytes"][0] + columns["n_input_nonzero_bytes"][0] == 4
    assert columns["n_input_zero_bytes"] == [2]
    assert columns["block_hash"] == [b"\x09" * 32]
    assert columns["to_address"] == [BOB]


def test_missing_block_hash_becomes_zero():
    columns = Transactions()
    tx = make_tx(block_hash=None)
    process_transaction(tx, TransactionReceipt(tx.hash, status=1), columns, full_schema(), False, 0)
    assert columns["block_hash"] == [bytes(32)]


def test_exclude_failed_skips_failed_transaction():
    columns = Transactions()
    tx = make_tx()
    process_transaction(tx, TransactionReceipt(tx.hash, status=0), columns, full_schema(), True, 0)
    assert len(columns) == 0
    assert columns["transaction_hash"] == []


def test_success_not_needed_without_receipt():
    schema = Table(Datatype.TRANSACTIONS, ("transaction_hash", "success", "chain_id")[::2])
    columns = Transactions()
    tx = make_tx()
    process_transaction(tx, None, columns, schema, False, 0)
    assert columns["transaction_hash"] == [tx.hash]
    assert columns["success"] == []


def test_unknown_status_raises_when_success_requested():
    columns = Transactions()
    with pytest.raises(CollectError):
        process_transaction(make_tx(chain_id=5), None, columns, full_schema(), False, 0)


def test_tx_success_from_status():
    tx = make_tx()
    assert tx_success(tx, TransactionReceipt(tx.hash, status=1)) is True
    assert tx_success(tx, TransactionReceipt(tx.hash, status=0)) is False


def test_tx_success_before_byzantium_uses_gas_used():
    tx = make_tx(block_number=100, chain_id=1)
    assert tx_success(tx, TransactionReceipt(tx.hash, gas_used=0)) is True
    assert tx_success(tx, TransactionReceipt(tx.hash, gas_used=5)) is False
    with pytest.raises(CollectError):
        tx_success(tx, None)


def test_tx_success_after_byzantium_without_status_raises():
    tx = make_tx(block_number=4_370_000, chain_id=1)
    with pytest.raises(CollectError):
        tx_success(tx, TransactionReceipt(tx.hash, gas_used=0))


def test_transform_block_response_uses_block_timestamp():
    columns = Transactions()
    txs = [make_tx(1), make_tx(2)]
    pairs = [(tx, TransactionReceipt(tx.hash, status=1)) for tx in txs]
    block = Block(number=20_000_000, timestamp=99, transactions=txs)
    transform_block_response((block, pairs, False), columns, full_schema())
    assert columns["timestamp"] == [99, 99]
    assert columns["transaction_hash"] == [tx.hash for tx in txs]
    output = columns.to_columns({Datatype.TRANSACTIONS: full_schema()}, 1)
    assert output[Datatype.TRANSACTIONS]["chain_id"] == [1, 1]