"""Contract code read during execution, taken from prestate traces."""

from __future__ import annotations

from chainfreeze.balance_reads import PrestateResponse, _iter_account_states, _store_transaction
from chainfreeze.records import AccountState
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema


class CodeReads(ColumnData):
    """Columns for code reads."""

    DATATYPE = Datatype.CODE_READS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "contract_address",
        "code",
        "chain_id",
    )


def process_code_reads(response: PrestateResponse, columns: CodeReads, schemas: Schemas) -> None:
    """Append one row per account whose code was read."""
    schema = get_schema(schemas, Datatype.CODE_READS)
    block_number = response[0]
    for index, tx, addr, state in _iter_account_states(response):
        process_code_read(addr, state, block_number, tx, index, columns, schema)


def process_code_read(
    addr: bytes,
    account_state: AccountState,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: CodeReads,
    schema: Table,
) -> None:
    """Append a row for one account, if its code is known; the code text is kept as bytes."""
    if account_state.code is None:
        return
    columns.n_rows += 1
    _store_transaction(columns, schema, block_number, transaction_hash, transaction_index)
    columns.store(schema, "contract_address", bytes(addr))
    columns.store(schema, "code", account_state.code.encode())