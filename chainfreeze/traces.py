"""Parity-style call traces as rows."""

from __future__ import annotations

from collections.abc import Iterable

from chainfreeze.records import (
    Action,
    ActionType,
    CallAction,
    CallResult,
    CallType,
    CreateAction,
    CreateResult,
    RewardAction,
    RewardType,
    SuicideAction,
    Trace,
    TraceResult,
)
from chainfreeze.schema import ColumnData, Datatype, Schemas, Table, get_schema


class Traces(ColumnData):
    """Columns for call traces."""

    DATATYPE = Datatype.TRACES
    COLUMNS = (
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
        "transaction_index",
        "transaction_hash",
        "block_number",
        "block_hash",
        "error",
        "chain_id",
    )
    OPTIONAL_PARAMETERS = ("from_address", "to_address")


_REWARD_TYPES = {
    RewardType.BLOCK: "reward",
    RewardType.UNCLE: "uncle",
    RewardType.EMPTY_STEP: "empty_step",
    RewardType.EXTERNAL: "external",
}

_ACTION_TYPES = {
    ActionType.CALL: "call",
    ActionType.CREATE: "create",
    ActionType.REWARD: "reward",
    ActionType.SUICIDE: "suicide",
}

_CALL_TYPES = {
    CallType.NONE: "none",
    CallType.CALL: "call",
    CallType.CALL_CODE: "call_code",
    CallType.DELEGATE_CALL: "delegate_call",
    CallType.STATIC_CALL: "static_call",
}


def reward_type_to_string(reward_type: RewardType) -> str:
    return _REWARD_TYPES[reward_type]


def action_type_to_string(action_type: ActionType) -> str:
    return _ACTION_TYPES[action_type]


def action_call_type_to_string(action_call_type: CallType) -> str:
    return _CALL_TYPES[action_call_type]


def _sender(action: Action) -> bytes | None:
    if isinstance(action, (CallAction, CreateAction)):
        return action.from_address
    if isinstance(action, SuicideAction):
        return action.address
    return None


def _recipient(action: Action) -> bytes | None:
    if isinstance(action, CallAction):
        return action.to_address
    if isinstance(action, SuicideAction):
        return action.refund_address
    if isinstance(action, RewardAction):
        return action.author
    return None


def filter_traces_by_from_to_addresses(
    traces: Iterable[Trace],
    from_address: bytes | None,
    to_address: bytes | None,
) -> list[Trace]:
    """Keep the traces whose sender and recipient match the given addresses."""
    return [
        trace
        for trace in traces
        if (from_address is None or _sender(trace.action) == bytes(from_address))
        and (to_address is None or _recipient(trace.action) == bytes(to_address))
    ]


def _store_action(action: Action, columns: ColumnData, schema: Table) -> None:
    init = input_data = call_type = reward_type = to = gas = None
    if isinstance(action, CallAction):
        sender, to, value, gas = action.from_address, action.to_address, action.value, action.gas
        input_data = action.input
        call_type = action_call_type_to_string(action.call_type)
    elif isinstance(action, CreateAction):
        sender, value, gas, init = action.from_address, action.value, action.gas, action.init
    elif isinstance(action, SuicideAction):
        sender, to, value = action.address, action.refund_address, action.balance
    else:
        sender, value = action.author, action.value
        reward_type = reward_type_to_string(action.reward_type)
    columns.store(schema, "action_from", bytes(sender))
    columns.store(schema, "action_to", None if to is None else bytes(to))
    columns.store(schema, "action_value", str(value))
    columns.store(schema, "action_gas", gas)
    columns.store(schema, "action_input", None if input_data is None else bytes(input_data))
    columns.store(schema, "action_call_type", call_type)
    columns.store(schema, "action_init", None if init is None else bytes(init))
    columns.store(schema, "action_reward_type", reward_type)


def _store_result(result: TraceResult, columns: ColumnData, schema: Table) -> None:
    gas_used = output = code = address = None
    if isinstance(result, CallResult):
        gas_used, output = result.gas_used, bytes(result.output)
    elif isinstance(result, CreateResult):
        gas_used, code, address = result.gas_used, bytes(result.code), bytes(result.address)
    columns.store(schema, "result_gas_used", gas_used)
    columns.store(schema, "result_output", output)
    columns.store(schema, "result_code", code)
    columns.store(schema, "result_address", address)


def process_traces(traces: Iterable[Trace], columns: Traces, schemas: Schemas) -> None:
    """Append one row per trace."""
    schema = get_schema(schemas, Datatype.TRACES)
    for trace in traces:
        columns.n_rows += 1
        _store_action(trace.action, columns, schema)
        _store_result(trace.result, columns, schema)
        columns.store(schema, "action_type", action_type_to_string(trace.action_type))
        columns.store(schema, "trace_address", "_".join(str(n) for n in trace.trace_address))
        columns.store(schema, "subtraces", trace.subtraces)
        columns.store(schema, "transaction_index", trace.transaction_position)
        columns.store(
            schema,
            "transaction_hash",
            None if trace.transaction_hash is None else bytes(trace.transaction_hash),
        )
        columns.store(schema, "block_number", trace.block_number)
        columns.store(schema, "block_hash", bytes(trace.block_hash))
        columns.store(schema, "error", trace.error)


def filter_failed_traces(traces: Iterable[Trace]) -> list[Trace]:
    """Drop traces that errored, together with every trace nested beneath them."""
    error_address: list[int] | None = None
    kept: list[Trace] = []
    for trace in traces:
        if not trace.trace_address:
            error_address = None
        if error_address is not None:
            if trace.trace_address[: len(error_address)] == error_address and len(
                trace.trace_address
            ) >= len(error_address):
                continue
            error_address = None
        if trace.error is not None:
            error_address = list(trace.trace_address)
        else:
            kept.append(trace)
    return kept