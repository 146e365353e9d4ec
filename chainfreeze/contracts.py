"""Contract creations found in call traces."""

from __future__ import annotations

from collections.abc import Iterable

from chainfreeze.records import (
    CallAction,
    CreateAction,
    CreateResult,
    RewardAction,
    SuicideAction,
    Trace,
    keccak256,
)
from chainfreeze.schema import ColumnData, Datatype, Schemas, get_schema


class Contracts(ColumnData):
    """Columns for deployed contracts."""

    DATATYPE = Datatype.CONTRACTS
    COLUMNS = (
        "block_number",
        "block_hash",
        "create_index",
        "transaction_hash",
        "contract_address",
        "deployer",
        "factory",
        "init_code",
        "code",
        "init_code_hash",
        "n_init_code_bytes",
        "n_code_bytes",
        "code_hash",
        "chain_id",
    )
    DEFAULT_SORT = ("block_number", "create_index")


def _top_level_sender(trace: Trace) -> bytes:
    action = trace.action
    if isinstance(action, (CallAction, CreateAction)):
        return action.from_address
    if isinstance(action, SuicideAction):
        return action.refund_address
    if isinstance(action, RewardAction):
        return action.author
    raise TypeError(f"unknown trace action: {action!r}")


def process_contracts(traces: Iterable[Trace], columns: Contracts, schemas: Schemas) -> None:
    """Append one row per successful contract creation."""
    schema = get_schema(schemas, Datatype.CONTRACTS)
    deployer = bytes(20)
    create_index = 0
    for trace in traces:
        if not trace.trace_address:
            deployer = bytes(_top_level_sender(trace))
        action, result = trace.action, trace.result
        if not (isinstance(action, CreateAction) and isinstance(result, CreateResult)):
            continue
        columns.n_rows += 1
        columns.store(schema, "block_number", trace.block_number)
        columns.store(schema, "block_hash", bytes(trace.block_hash))
        columns.store(schema, "create_index", create_index)
        create_index += 1
        tx = trace.transaction_hash
        columns.store(schema, "transaction_hash", None if tx is None else bytes(tx))
        columns.store(schema, "contract_address", bytes(result.address))
        columns.store(schema, "deployer", deployer)
        columns.store(schema, "factory", bytes(action.from_address))
        columns.store(schema, "init_code", bytes(action.init))
        columns.store(schema, "code", bytes(result.code))
        columns.store(schema, "init_code_hash", keccak256(result.code))
        columns.store(schema, "code_hash", keccak256(action.init))
        columns.store(schema, "n_init_code_bytes", len(action.init))
        columns.store(schema, "n_code_bytes", len(result.code))