"""Call frames from geth call traces, flattened into rows."""

from __future__ import annotations

from collections.abc import Sequence

from chainfreeze.records import CallFrame
from chainfreeze.schema import CollectError, ColumnData, Datatype, Schemas

GethCallsResponse = tuple[int | None, Sequence[bytes | None], Sequence[CallFrame]]


class GethCalls(ColumnData):
    """Columns for geth call traces."""

    DATATYPE = Datatype.GETH_CALLS
    COLUMNS = (
        "typ",
        "from_address",
        "to_address",
        "value",
        "gas",
        "gas_used",
        "input",
        "output",
        "error",
        "block_number",
        "transaction_hash",
        "transaction_index",
        "trace_address",
        "chain_id",
    )


def name_or_address_bytes(value: bytes | str | None) -> bytes | None:
    """The address bytes of a call target; a name in place of an address is an error."""
    if value is None:
        return None
    if isinstance(value, str):
        raise CollectError("block name string not allowed")
    return bytes(value)


def process_geth_traces(
    response: GethCallsResponse, columns: GethCalls, schemas: Schemas
) -> None:
    """Append one row per call frame, each transaction's frames in depth-first order."""
    block_number, txs, traces = response
    schema = schemas.get(Datatype.GETH_CALLS)
    if schema is None:
        raise CollectError("schema for geth_traces missing")

    for tx_index, (tx, root) in enumerate(zip(txs, traces)):
        tx_hash = None if tx is None else bytes(tx)
        stack: list[tuple[CallFrame, tuple[int, ...]]] = [(root, ())]
        while stack:
            frame, trace_address = stack.pop()
            columns.n_rows += 1
            columns.store(schema, "typ", frame.typ)
            columns.store(schema, "from_address", bytes(frame.from_address))
            columns.store(schema, "to_address", name_or_address_bytes(frame.to))
            columns.store(schema, "value", frame.value)
            columns.store(schema, "gas", frame.gas)
            columns.store(schema, "gas_used", frame.gas_used)
            columns.store(schema, "input", bytes(frame.input))
            columns.store(schema, "output", None if frame.output is None else bytes(frame.output))
            columns.store(schema, "error", frame.error)
            columns.store(schema, "block_number", block_number)
            columns.store(schema, "transaction_hash", tx_hash)
            columns.store(schema, "transaction_index", tx_index)
            columns.store(schema, "trace_address", " ".join(str(n) for n in trace_address))
            children = frame.calls or []
            for position in reversed(range(len(children))):
                stack.append((children[position], trace_address + (position,)))