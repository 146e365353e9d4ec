"""Nonce changes taken from parity-style state diffs."""

from __future__ import annotations

from chainfreeze.balance_diffs import (
    StateDiffResponse,
    _diff_endpoints,
    _iter_account_diffs,
    _store_location,
)
from chainfreeze.records import Diff
from chainfreeze.schema import CollectError, ColumnData, Datatype, Schemas, Table, get_schema

_U64_LIMIT = 1 << 64


class NonceDiffs(ColumnData):
    """Columns for nonce diffs."""

    DATATYPE = Datatype.NONCE_DIFFS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "from_value",
        "to_value",
        "chain_id",
    )


def _as_u64(value: int) -> int:
    value = int(value)
    if not 0 <= value < _U64_LIMIT:
        raise CollectError("nonce does not fit in 64 bits")
    return value


def process_nonce_diffs(
    response: StateDiffResponse, columns: NonceDiffs, schemas: Schemas
) -> None:
    """Append one row per changed nonce."""
    schema = get_schema(schemas, Datatype.NONCE_DIFFS)
    block_number = response[0]
    for index, tx, addr, diff in _iter_account_diffs(response):
        process_nonce_diff(addr, diff.nonce, block_number, tx, index, columns, schema)


def process_nonce_diff(
    addr: bytes,
    diff: Diff,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: NonceDiffs,
    schema: Table,
) -> None:
    """Append a row for one nonce diff, unless the nonce stayed the same."""
    endpoints = _diff_endpoints(diff, 0)
    if endpoints is None:
        return
    from_value, to_value = (_as_u64(value) for value in endpoints)
    columns.n_rows += 1
    _store_location(columns, schema, block_number, transaction_hash, transaction_index, addr)
    columns.store(schema, "from_value", from_value)
    columns.store(schema, "to_value", to_value)