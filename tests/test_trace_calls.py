import pytest

from chainfreeze.records import (
    CallAction,
    CallResult,
    CreateAction,
    CreateResult,
    RewardAction,
    TransactionTrace,
)
from chainfreeze.schema import CollectError, Datatype, Table
from chainfreeze.trace_calls import TraceCalls, process_transaction_traces

SENDER = b"\x01" * 20
TARGET = b"\x02" * 20
CONTRACT = b"\x03" * 20
CALL_DATA = b"\xaa\xbb"


def full_schema():
    return Table(Datatype.TRACE_CALLS, TraceCalls.COLUMNS)


def sample_traces():
    return [
        TransactionTrace(
            action=CallAction(SENDER, TARGET, value=5, gas=100, input=b"\x01"),
            result=CallResult(gas_used=40, output=b"\x09"),
            subtraces=1,
        ),
        TransactionTrace(
            action=CreateAction(TARGET, value=0, gas=50, init=b"\x60"),
            result=CreateResult(address=CONTRACT, gas_used=20, code=b"\x61"),
            trace_address=[0, 1],
        ),
    ]


def test_rows_per_trace_with_enumerated_index():
    columns = TraceCalls()
    process_transaction_traces((7, CONTRACT, CALL_DATA, sample_traces()), columns, full_schema())
    assert len(columns) == 2
    assert columns["transaction_index"] == [0, 1]
    assert columns["block_number"] == [7, 7]
    assert columns["tx_to_address"] == [CONTRACT, CONTRACT]
    assert columns["tx_call_data"] == [CALL_DATA, CALL_DATA]


def test_action_and_result_columns():
    columns = TraceCalls()
    process_transaction_traces((7, CONTRACT, CALL_DATA, sample_traces()), columns, full_schema())
    assert columns["action_from"] == [SENDER, TARGET]
    assert columns["action_to"] == [TARGET, None]
    assert columns["action_call_type"] == ["call", None]
    assert columns["action_init"] == [None, b"\x60"]
    assert columns["action_type"] == ["call", "create"]
    assert columns["result_gas_used"] == [40, 20]
    assert columns["result_output"] == [b"\x09", None]
    assert columns["result_address"] == [None, CONTRACT]
    assert columns["subtraces"] == [1, 0]


def test_trace_address_joined_with_underscore():
    columns = TraceCalls()
    process_transaction_traces((7, CONTRACT, CALL_DATA, sample_traces()), columns, full_schema())
    assert columns["trace_address"] == ["", "0_1"]


def test_reward_action_has_reward_type():
    columns = TraceCalls()
    traces = [TransactionTrace(action=RewardAction(SENDER, value=2))]
    process_transaction_traces((1, CONTRACT, CALL_DATA, traces), columns, full_schema())
    assert columns["action_reward_type"] == ["reward"]
    assert columns["result_gas_used"] == [None]


def test_only_requested_columns_are_kept():
    schema = Table(Datatype.TRACE_CALLS, ("block_number", "action_type", "chain_id"))
    columns = TraceCalls()
    process_transaction_traces((9, CONTRACT, CALL_DATA, sample_traces()), columns, schema)
    out = columns.to_columns({Datatype.TRACE_CALLS: schema}, 1)[Datatype.TRACE_CALLS]
    assert list(out) == ["block_number", "action_type", "chain_id"]
    assert out["chain_id"] == [1, 1]
    assert columns["action_from"] == []


def test_missing_schema_raises():
    columns = TraceCalls()
    with pytest.raises(CollectError):
        columns.to_columns({}, 1)