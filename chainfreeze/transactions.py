"""Transactions as rows, with their success taken from receipts."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from chainfreeze.records import Block, Transaction, TransactionReceipt
from chainfreeze.schema import CollectError, ColumnData, Datatype, Table

TransactionAndReceipt = tuple[Transaction, "TransactionReceipt | None"]
BlockResponse = tuple[Block, Sequence[TransactionAndReceipt], bool]

_BYZANTIUM_BLOCK = 4_370_000
_ZERO_HASH = bytes(32)


class Transactions(ColumnData):
    """Columns for transactions."""

    DATATYPE = Datatype.TRANSACTIONS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "nonce",
        "from_address",
        "to_address",
        "value",
        "input",
        "gas_limit",
        "gas_used",
        "gas_price",
        "transaction_type",
        "max_priority_fee_per_gas",
        "max_fee_per_gas",
        "success",
        "n_input_bytes",
        "n_input_zero_bytes",
        "n_input_nonzero_bytes",
        "n_rlp_bytes",
        "block_hash",
        "chain_id",
        "timestamp",
    )
    ALIASES = ("txs",)
    DEFAULT_COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "nonce",
        "from_address",
        "to_address",
        "value",
        "input",
        "gas_limit",
        "gas_used",
        "gas_price",
        "transaction_type",
        "max_priority_fee_per_gas",
        "max_fee_per_gas",
        "success",
        "n_input_bytes",
        "n_input_zero_bytes",
        "n_input_nonzero_bytes",
        "chain_id",
    )
    OPTIONAL_PARAMETERS = ("from_address", "to_address")


def filter_transactions(
    transactions: Iterable[Transaction],
    from_address: bytes | None,
    to_address: bytes | None,
) -> list[Transaction]:
    """Keep the transactions sent from and to the given addresses."""
    return [
        tx
        for tx in transactions
        if (from_address is None or bytes(tx.from_address) == bytes(from_address))
        and (
            to_address is None
            or (tx.to_address is not None and bytes(tx.to_address) == bytes(to_address))
        )
    ]


def transform_block_response(
    response: BlockResponse, columns: Transactions, schema: Table
) -> None:
    """Append a row for each transaction of a block, stamped with the block's timestamp."""
    block, transactions_with_receipts, exclude_failed = response
    for tx, receipt in transactions_with_receipts:
        process_transaction(tx, receipt, columns, schema, exclude_failed, block.timestamp)


def tx_success(tx: Transaction, receipt: TransactionReceipt | None) -> bool:
    """Whether a transaction succeeded, from its receipt status or, before Byzantium, its gas."""
    if receipt is not None and receipt.status is not None:
        return receipt.status == 1
    if (
        tx.chain_id == 1
        and tx.block_number is not None
        and tx.block_number < _BYZANTIUM_BLOCK
        and receipt is not None
        and receipt.gas_used is not None
    ):
        return receipt.gas_used == 0
    raise CollectError("could not determine status of transaction")


def process_transaction(
    tx: Transaction,
    receipt: TransactionReceipt | None,
    columns: Transactions,
    schema: Table,
    exclude_failed: bool,
    timestamp: int,
) -> None:
    """Append a row for one transaction, skipping it if it failed and failures are excluded."""
    if exclude_failed or schema.has_column("success"):
        success = tx_success(tx, receipt)
        if exclude_failed and not success:
            return
    else:
        success = False

    input_data = bytes(tx.input)
    n_input_bytes = len(input_data)
    n_input_zero_bytes = input_data.count(0)

    columns.n_rows += 1
    columns.store(schema, "block_number", tx.block_number)
    columns.store(schema, "transaction_index", tx.transaction_index)
    columns.store(schema, "transaction_hash", bytes(tx.hash))
    columns.store(schema, "from_address", bytes(tx.from_address))
    columns.store(
        schema, "to_address", None if tx.to_address is None else bytes(tx.to_address)
    )
    columns.store(schema, "nonce", tx.nonce)
    columns.store(schema, "value", tx.value)
    columns.store(schema, "input", input_data)
    columns.store(schema, "gas_limit", tx.gas)
    columns.store(schema, "success", success)
    columns.store(schema, "n_input_bytes", n_input_bytes)
    columns.store(schema, "n_input_zero_bytes", n_input_zero_bytes)
    columns.store(schema, "n_input_nonzero_bytes", n_input_bytes - n_input_zero_bytes)
    columns.store(schema, "n_rlp_bytes", len(tx.rlp))
    columns.store(schema, "gas_used", None if receipt is None else receipt.gas_used)
    columns.store(schema, "gas_price", tx.gas_price)
    columns.store(schema, "transaction_type", tx.transaction_type)
    columns.store(schema, "max_fee_per_gas", tx.max_fee_per_gas)
    columns.store(schema, "max_priority_fee_per_gas", tx.max_priority_fee_per_gas)
    columns.store(schema, "timestamp", timestamp)
    block_hash = _ZERO_HASH if tx.block_hash is None else bytes(tx.block_hash)
    columns.store(schema, "block_hash", block_hash)