"""Storage slot changes taken from parity-style state diffs."""

from __future__ import annotations

from collections.abc import Mapping

from chainfreeze.balance_diffs import (
    StateDiffResponse,
    _diff_endpoints,
    _iter_account_diffs,
    _store_location,
)
from chainfreeze.records import Diff
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema

_ZERO_WORD = bytes(32)


class StorageDiffs(ColumnData):
    """Columns for storage diffs."""

    DATATYPE = Datatype.STORAGE_DIFFS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "slot",
        "from_value",
        "to_value",
        "chain_id",
    )
    ALIASES = ("slot_diffs",)


def process_storage_diffs(
    response: StateDiffResponse, columns: StorageDiffs, schemas: Schemas
) -> None:
    """Append one row per changed storage slot."""
    schema = get_schema(schemas, Datatype.STORAGE_DIFFS)
    block_number = response[0]
    for index, tx, addr, diff in _iter_account_diffs(response):
        process_storage_diff(addr, diff.storage, block_number, tx, index, columns, schema)


def process_storage_diff(
    addr: bytes,
    diff: Mapping[bytes, Diff],
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: StorageDiffs,
    schema: Table,
) -> None:
    """Append a row for every slot of an account whose value changed, slots in order."""
    for slot, sub_diff in sorted(diff.items(), key=lambda item: bytes(item[0])):
        endpoints = _diff_endpoints(sub_diff, _ZERO_WORD)
        if endpoints is None:
            continue
        from_value, to_value = endpoints
        columns.n_rows += 1
        _store_location(columns, schema, block_number, transaction_hash, transaction_index, addr)
        columns.store(schema, "slot", bytes(slot))
        columns.store(schema, "from_value", bytes(from_value))
        columns.store(schema, "to_value", bytes(to_value))