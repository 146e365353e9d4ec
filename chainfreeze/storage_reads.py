"""Storage slots read during execution, taken from prestate traces."""

from __future__ import annotations

from chainfreeze.balance_reads import PrestateResponse, _iter_account_states, _store_transaction
from chainfreeze.records import AccountState
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema


class StorageReads(ColumnData):
    """Columns for storage reads."""

    DATATYPE = Datatype.STORAGE_READS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "contract_address",
        "slot",
        "value",
        "chain_id",
    )
    ALIASES = ("slot_reads",)


def process_storage_reads(
    response: PrestateResponse, columns: StorageReads, schemas: Schemas
) -> None:
    """Append one row per storage slot read."""
    schema = get_schema(schemas, Datatype.STORAGE_READS)
    block_number = response[0]
    for index, tx, addr, state in _iter_account_states(response):
        process_storage_read(addr, state, block_number, tx, index, columns, schema)


def process_storage_read(
    addr: bytes,
    account_state: AccountState,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: StorageReads,
    schema: Table,
) -> None:
    """Append a row for every slot of an account that was read, slots in order."""
    if account_state.storage is None:
        return
    for slot, value in sorted(account_state.storage.items(), key=lambda item: bytes(item[0])):
        columns.n_rows += 1
        _store_transaction(columns, schema, block_number, transaction_hash, transaction_index)
        columns.store(schema, "contract_address", bytes(addr))
        columns.store(schema, "slot", bytes(slot))
        columns.store(schema, "value", bytes(value))