"""Account nonces read during execution, taken from prestate traces."""

from __future__ import annotations

from chainfreeze.balance_reads import PrestateResponse, _iter_account_states, _store_transaction
from chainfreeze.nonce_diffs import _as_u64
from chainfreeze.records import AccountState
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema


class NonceReads(ColumnData):
    """Columns for nonce reads."""

    DATATYPE = Datatype.NONCE_READS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "nonce",
        "chain_id",
    )


def process_nonce_reads(response: PrestateResponse, columns: NonceReads, schemas: Schemas) -> None:
    """Append one row per account whose nonce was read."""
    schema = get_schema(schemas, Datatype.NONCE_READS)
    block_number = response[0]
    for index, tx, addr, state in _iter_account_states(response):
        process_nonce_read(addr, state, block_number, tx, index, columns, schema)


def process_nonce_read(
    addr: bytes,
    account_state: AccountState,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: NonceReads,
    schema: Table,
) -> None:
    """Append a row for one account, if its nonce is known."""
    if account_state.nonce is None:
        return
    nonce = _as_u64(account_state.nonce)
    columns.n_rows += 1
    _store_transaction(columns, schema, block_number, transaction_hash, transaction_index)
    columns.store(schema, "address", bytes(addr))
    columns.store(schema, "nonce", nonce)