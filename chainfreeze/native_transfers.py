"""Transfers of the native currency found in call traces."""

from __future__ import annotations

from collections.abc import Iterable

from chainfreeze.records import (
    CallAction,
    CreateAction,
    CreateResult,
    SuicideAction,
    Trace,
)
from chainfreeze.schema import ColumnData, Datatype, Schemas, get_schema


class NativeTransfers(ColumnData):
    """Columns for native transfers."""

    DATATYPE = Datatype.NATIVE_TRANSFERS
    COLUMNS = (
        "block_number",
        "block_hash",
        "transaction_index",
        "transfer_index",
        "transaction_hash",
        "from_address",
        "to_address",
        "value",
        "chain_id",
    )
    OPTIONAL_PARAMETERS = ("from_address", "to_address")


def _endpoints(trace: Trace) -> tuple[bytes, bytes, int]:
    action = trace.action
    if isinstance(action, CallAction):
        return bytes(action.from_address), bytes(action.to_address), action.value
    if isinstance(action, CreateAction):
        if isinstance(trace.result, CreateResult):
            to = bytes(trace.result.address)
        else:
            to = bytes(32)
        return bytes(action.from_address), to, action.value
    if isinstance(action, SuicideAction):
        return bytes(action.address), bytes(action.refund_address), action.balance
    return bytes(20), bytes(action.author), action.value


def process_native_transfers(
    traces: Iterable[Trace], columns: NativeTransfers, schemas: Schemas
) -> None:
    """Append one row per trace, numbering them in order."""
    schema = get_schema(schemas, Datatype.NATIVE_TRANSFERS)
    for transfer_index, trace in enumerate(traces):
        columns.n_rows += 1
        columns.store(schema, "block_number", trace.block_number)
        columns.store(schema, "transaction_index", trace.transaction_position)
        columns.store(schema, "block_hash", bytes(trace.block_hash))
        columns.store(schema, "transfer_index", transfer_index)
        tx = trace.transaction_hash
        columns.store(schema, "transaction_hash", None if tx is None else bytes(tx))
        sender, recipient, value = _endpoints(trace)
        columns.store(schema, "from_address", sender)
        columns.store(schema, "to_address", recipient)
        columns.store(schema, "value", value)