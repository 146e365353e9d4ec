"""Call traces produced by simulating a call against a contract."""

from __future__ import annotations

from collections.abc import Sequence

from chainfreeze.records import TransactionTrace
from chainfreeze.schema import ColumnData, Datatype, Table
from chainfreeze.traces import _store_action, _store_result, action_type_to_string


class TraceCalls(ColumnData):
    """Columns for simulated call traces."""

    DATATYPE = Datatype.TRACE_CALLS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "action_from",
        "action_to",
        "action_value",
        "action_gas",
        "action_input",
        "action_call_type",
        "action_init",
        "action_reward_type",
        "action_type",
        "result_gas_used",
        "result_output",
        "result_code",
        "result_address",
        "trace_address",
        "subtraces",
        "error",
        "tx_to_address",
        "tx_call_data",
        "chain_id",
    )
    DEFAULT_BLOCKS = "latest"
    REQUIRED_PARAMETERS = ("contract", "call_data")
    ARG_ALIASES = {"address": "contract", "to_address": "contract"}


def process_transaction_traces(
    response: tuple[int, bytes, bytes, Sequence[TransactionTrace]],
    columns: TraceCalls,
    schema: Table,
) -> None:
    """Append one row per trace of a simulated call."""
    block_number, contract, call_data, traces = response
    contract = bytes(contract)
    call_data = bytes(call_data)
    for transaction_index, trace in enumerate(traces):
        columns.n_rows += 1
        _store_action(trace.action, columns, schema)
        _store_result(trace.result, columns, schema)
        columns.store(schema, "action_type", action_type_to_string(trace.action_type))
        columns.store(schema, "trace_address", "_".join(str(n) for n in trace.trace_address))
        columns.store(schema, "subtraces", trace.subtraces)
        columns.store(schema, "transaction_index", transaction_index)
        columns.store(schema, "block_number", block_number)
        columns.store(schema, "error", trace.error)
        columns.store(schema, "tx_to_address", contract)
        columns.store(schema, "tx_call_data", call_data)