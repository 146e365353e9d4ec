"""Contract code changes taken from parity-style state diffs."""

from __future__ import annotations

from chainfreeze.balance_diffs import (
    StateDiffResponse,
    _diff_endpoints,
    _iter_account_diffs,
    _store_location,
)
from chainfreeze.records import Diff, DiffKind
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema


class CodeDiffs(ColumnData):
    """Columns for code diffs."""

    DATATYPE = Datatype.CODE_DIFFS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "from_value",
        "to_value",
        "chain_id",
    )


def process_code_diffs(response: StateDiffResponse, columns: CodeDiffs, schemas: Schemas) -> None:
    """Append one row per changed contract code."""
    schema = get_schema(schemas, Datatype.CODE_DIFFS)
    block_number = response[0]
    for index, tx, addr, diff in _iter_account_diffs(response):
        process_code_diff(addr, diff.code, block_number, tx, index, columns, schema)


def process_code_diff(
    addr: bytes,
    diff: Diff,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: CodeDiffs,
    schema: Table,
) -> None:
    """Append a row for one code diff; accounts born without code are skipped."""
    if diff.kind is DiffKind.BORN and not diff.to_value:
        return
    endpoints = _diff_endpoints(diff, b"")
    if endpoints is None:
        return
    from_value, to_value = endpoints
    columns.n_rows += 1
    _store_location(columns, schema, block_number, transaction_hash, transaction_index, addr)
    columns.store(schema, "from_value", bytes(from_value))
    columns.store(schema, "to_value", bytes(to_value))