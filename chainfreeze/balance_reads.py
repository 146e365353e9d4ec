"""Account balances read during execution, taken from prestate traces."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

from chainfreeze.records import AccountState
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema

PrestateResponse = tuple[
    int | None, Sequence[bytes | None], Sequence[Mapping[bytes, AccountState]]
]


class BalanceReads(ColumnData):
    """Columns for balance reads."""

    DATATYPE = Datatype.BALANCE_READS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "balance",
        "chain_id",
    )


def _iter_account_states(
    response: PrestateResponse,
) -> Iterator[tuple[int, bytes | None, bytes, AccountState]]:
    """Yield (transaction index, transaction hash, address, state), addresses in order."""
    _, txs, traces = response
    for index, (trace, tx) in enumerate(zip(traces, txs)):
        for addr, state in sorted(trace.items(), key=lambda item: bytes(item[0])):
            yield index, tx, bytes(addr), state


def _store_transaction(
    columns: ColumnData,
    schema: Table,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
) -> None:
    columns.store(schema, "block_number", block_number)
    columns.store(schema, "transaction_index", transaction_index)
    columns.store(
        schema,
        "transaction_hash",
        None if transaction_hash is None else bytes(transaction_hash),
    )


def process_balance_reads(
    response: PrestateResponse, columns: BalanceReads, schemas: Schemas
) -> None:
    """Append one row per account whose balance was read."""
    schema = get_schema(schemas, Datatype.BALANCE_READS)
    block_number = response[0]
    for index, tx, addr, state in _iter_account_states(response):
        process_balance_read(addr, state, block_number, tx, index, columns, schema)


def process_balance_read(
    addr: bytes,
    account_state: AccountState,
    block_number: int | None,
    transaction_hash: bytes | None,
    transaction_index: int,
    columns: BalanceReads,
    schema: Table,
) -> None:
    """Append a row for one account, if its balance is known."""
    if account_state.balance is None:
        return
    columns.n_rows += 1
    _store_transaction(columns, schema, block_number, transaction_hash, transaction_index)
    columns.store(schema, "address", bytes(addr))
    columns.store(schema, "balance", account_state.balance)