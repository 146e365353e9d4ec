"""Balance changes taken from parity-style state diffs."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from chainfreeze.records import AccountDiff, BlockTrace, Diff, DiffKind
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema

StateDiffResponse = tuple[int | None, Sequence[bytes | None], Sequence[BlockTrace]]


class BalanceDiffs(ColumnData):
    """Columns for balance diffs."""

    DATATYPE = Datatype.BALANCE_DIFFS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "from_value",
        "to_value",
        "chain_id",
    )


def _iter_account_diffs(
    response: StateDiffResponse,
) -> Iterator[tuple[int, bytes | None, bytes, AccountDiff]]:
    """Yield (transaction index, transaction hash, address, diff), addresses in order."""
    _, txs, traces = response
    for index, (trace, tx) in enumerate(zip(traces, txs)):
        if trace.state_diff is None:
            continue
        for addr, diff in sorted(trace.state_diff.items(), key=lambda item: bytes(item[0])):
            yield index, tx, bytes(addr), diff


def _diff_endpoints(diff: Diff, zero: Any) -> tuple[Any, Any] | None:
    """The values before and after a diff, or None when nothing changed."""
    if diff.kind is DiffKind.SAME:
        return None
    if diff.kind is DiffKind.BORN:
        return zero, diff.to_value
    if diff.kind is DiffKind.DIED:
        return diff.from_value, zero
    return diff.from_value, diff.to_value


def _store_location(
    columns: ColumnData,
    schema: Table,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    addr: bytes,
) -> None:
    columns.store(schema, "block_number", block_number)
    columns.store(schema, "transaction_index", transaction_index)
    columns.store(
        schema,
        "transaction_hash",
        None if transaction_hash is None else bytes(transaction_hash),
    )
    columns.store(schema, "address", bytes(addr))


def process_balance_diffs(
    response: StateDiffResponse, columns: BalanceDiffs, schemas: Schemas
) -> None:
    """Append one row per changed balance."""
    schema = get_schema(schemas, Datatype.BALANCE_DIFFS)
    block_number = response[0]
    for index, tx, addr, diff in _iter_account_diffs(response):
        process_balance_diff(addr, diff.balance, block_number, tx, index, columns, schema)


def process_balance_diff(
    addr: bytes,
    diff: Diff,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: BalanceDiffs,
    schema: Table,
) -> None:
    """Append a row for one balance diff, unless the balance stayed the same."""
    endpoints = _diff_endpoints(diff, 0)
    if endpoints is None:
        return
    from_value, to_value = endpoints
    columns.n_rows += 1
    _store_location(columns, schema, block_number, transaction_hash, transaction_index, addr)
    columns.store(schema, "from_value", from_value)
    columns.store(schema, "to_value", to_value)