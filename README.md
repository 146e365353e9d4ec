# chainfreeze

chainfreeze turns EVM chain data that you already hold into column tables, one table per dataset. It takes the following inputs:

- blocks and transactions with their receipts
- logs
- parity-style call traces, simulated call traces and state diffs
- geth call frames, prestate traces, diff-mode traces and 4byte counts

Each dataset appends rows to named columns. A column is kept only if that dataset's schema lists it.

## Installation

```
pip install chainfreeze
```

To run the test suite:

```
pip install "chainfreeze[test]"
pytest
```

## Concepts

- `chainfreeze.schema.Datatype` is an enum that names every kind of table.
- `chainfreeze.schema.Table` is the schema of one datatype. It holds the columns to keep, an optional sort order and an optional log decoder. `Table.has_column(name)` tells whether a column is wanted.
- `chainfreeze.schema.get_schema(schemas, datatype)` looks up a schema in a mapping of datatypes to tables. It raises `CollectError` if the schema is missing.
- `chainfreeze.schema.ColumnData` is the base class of every column store, such as `Traces`, `Blocks`, `Transactions`, `Logs` and `BalanceDiffs`.
  - `store(schema, name, value)` appends a value, but only if the schema wants that column.
  - `to_columns(schemas, chain_id)` returns `{datatype: {column: values}}` in schema order. The `chain_id` column is filled in from the argument.
- `chainfreeze.records` holds the plain dataclasses that the processors read:
  - `Block`, `Transaction`, `TransactionReceipt` and `Log`
  - `Trace` and `TransactionTrace`, with their `CallAction`, `CreateAction`, `SuicideAction` and `RewardAction` actions and their `CallResult` and `CreateResult` results
  - `BlockTrace`, `AccountDiff` and `Diff`
  - `AccountState` and `DiffMode`
  - `CallFrame`

  It also has `keccak256(data)`.

Problems are raised as `chainfreeze.schema.CollectError`. Some examples:

- a schema is missing
- a column name is unknown
- a transaction's success cannot be determined
- a 4byte key or a geth code string is malformed
- a nonce does not fit in 64 bits

## Datasets

| Module | Processing function(s) |
| --- | --- |
| `traces` | `process_traces`, plus `filter_failed_traces` and `filter_traces_by_from_to_addresses` |
| `contracts` | `process_contracts` |
| `native_transfers` | `process_native_transfers` |
| `trace_calls` | `process_transaction_traces` |
| `address_appearances` | `process_appearances` |
| `blocks` | `process_block` |
| `transactions` | `process_transaction`, `transform_block_response`, `filter_transactions` and `tx_success` |
| `logs` | `process_logs` |
| `erc20_transfers` | `process_erc20_transfers`, `is_erc20_transfer` and `transfer_topics` |
| `balance_diffs`, `code_diffs`, `nonce_diffs`, `storage_diffs` | the matching `process_*_diffs` functions, for parity-style state diffs |
| `balance_reads`, `code_reads`, `nonce_reads`, `storage_reads` | the matching `process_*_reads` functions, for geth prestate traces |
| `four_byte_counts` | `process_four_byte_counts` and `parse_signature_size` |
| `geth_calls` | `process_geth_traces` |
| `geth_state_diffs` | `process_geth_diffs` and the `transform_*_diffs` helpers, for geth diff-mode traces |

Some datasets fill several tables from one response:

- `CallTraceDerivatives` fills contracts, native transfers and traces, using `process_call_trace_derivatives`.
- `StateDiffs` fills the four state diff tables, using `process_state_diffs`.
- `StateReads` fills the four state read tables, using `process_state_reads`.
- `GethStateDiffs` fills the four geth diff tables, using `GethStateDiffs.transform`.
- `BlocksAndTransactions` fills blocks and transactions, using `transform_by_block` and `transform_by_transaction`.

`CallTraceDerivatives` and `StateReads` fill only the tables that have a schema. `GethStateDiffs` fills only the tables that are present and have a schema.

## Example

```python
from chainfreeze.records import CallAction, Trace
from chainfreeze.schema import Datatype, Table
from chainfreeze.traces import Traces, filter_failed_traces, process_traces

traces = [
    Trace(
        action=CallAction(from_address=bytes(20), to_address=bytes.fromhex("11" * 20), value=5),
        block_number=100,
    ),
]
schemas = {
    Datatype.TRACES: Table(
        datatype=Datatype.TRACES,
        columns=["block_number", "action_type", "action_value", "chain_id"],
    )
}
columns = Traces()
process_traces(filter_failed_traces(traces), columns, schemas)
tables = columns.to_columns(schemas, chain_id=1)
print(tables[Datatype.TRACES])
# {'block_number': [100], 'action_type': ['call'], 'action_value': ['5'], 'chain_id': [1]}
```

## What it does not do

chainfreeze does not do any of the following:

- It does not talk to a node. It makes no RPC requests, has no rate limiting and does no concurrency. You fetch the blocks, traces and logs yourself and build the records.
- It does not write Parquet, CSV or JSON files.
- It does not sort rows.
- It has no command-line program.
- It does not decode logs by itself. `process_logs` uses the decoder object placed on the `Table`, if one is there.