"""Block headers as rows."""

from __future__ import annotations

from chainfreeze.records import Block
from chainfreeze.schema import ColumnData, Datatype, Table


class Blocks(ColumnData):
    """Columns for blocks."""

    DATATYPE = Datatype.BLOCKS
    COLUMNS = (
        "block_hash",
        "parent_hash",
        "uncles_hash",
        "author",
        "state_root",
        "transactions_root",
        "receipts_root",
        "block_number",
        "gas_used",
        "gas_limit",
        "extra_data",
        "logs_bloom",
        "timestamp",
        "difficulty",
        "total_difficulty",
        "size",
        "mix_hash",
        "nonce",
        "base_fee_per_gas",
        "withdrawals_root",
        "chain_id",
    )
    DEFAULT_COLUMNS = (
        "block_number",
        "block_hash",
        "timestamp",
        "author",
        "gas_used",
        "extra_data",
        "base_fee_per_gas",
        "chain_id",
    )


def _optional_bytes(value: bytes | None) -> bytes | None:
    return None if value is None else bytes(value)


def process_block(block: Block, columns: Blocks, schema: Table) -> None:
    """Append one row for a block."""
    columns.n_rows += 1
    columns.store(schema, "block_hash", _optional_bytes(block.hash))
    columns.store(schema, "parent_hash", bytes(block.parent_hash))
    columns.store(schema, "uncles_hash", bytes(block.uncles_hash))
    columns.store(schema, "author", _optional_bytes(block.author))
    columns.store(schema, "state_root", bytes(block.state_root))
    columns.store(schema, "transactions_root", bytes(block.transactions_root))
    columns.store(schema, "receipts_root", bytes(block.receipts_root))
    columns.store(schema, "block_number", block.number)
    columns.store(schema, "gas_used", block.gas_used)
    columns.store(schema, "gas_limit", block.gas_limit)
    columns.store(schema, "extra_data", bytes(block.extra_data))
    columns.store(schema, "logs_bloom", _optional_bytes(block.logs_bloom))
    columns.store(schema, "timestamp", block.timestamp)
    columns.store(schema, "difficulty", block.difficulty)
    columns.store(schema, "total_difficulty", block.total_difficulty)
    columns.store(schema, "base_fee_per_gas", block.base_fee_per_gas)
    columns.store(schema, "size", block.size)
    columns.store(schema, "mix_hash", _optional_bytes(block.mix_hash))
    columns.store(schema, "nonce", _optional_bytes(block.nonce))
    columns.store(schema, "withdrawals_root", _optional_bytes(block.withdrawals_root))