"""Contracts, native transfers and traces collected from one set of call traces."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from chainfreeze.contracts import Contracts, process_contracts
from chainfreeze.native_transfers import NativeTransfers, process_native_transfers
from chainfreeze.records import Trace
from chainfreeze.schema import Datatype, Schemas
from chainfreeze.traces import Traces, filter_failed_traces, process_traces


@dataclass
class CallTraceDerivatives:
    """The datasets derived from call traces, filled side by side."""

    contracts: Contracts = field(default_factory=Contracts)
    native_transfers: NativeTransfers = field(default_factory=NativeTransfers)
    traces: Traces = field(default_factory=Traces)

    def to_columns(
        self, schemas: Schemas, chain_id: int
    ) -> dict[Datatype, dict[str, list[Any]]]:
        """Return the columns of every dataset that has a schema."""
        output: dict[Datatype, dict[str, list[Any]]] = {}
        for columns in (self.contracts, self.native_transfers, self.traces):
            if columns.DATATYPE in schemas:
                output.update(columns.to_columns(schemas, chain_id))
        return output


def process_call_trace_derivatives(
    traces: Iterable[Trace],
    columns: CallTraceDerivatives,
    schemas: Schemas,
    exclude_failed: bool,
) -> None:
    """Feed the traces to each dataset that has a schema."""
    traces = filter_failed_traces(traces) if exclude_failed else list(traces)
    if Datatype.CONTRACTS in schemas:
        process_contracts(traces, columns.contracts, schemas)
    if Datatype.NATIVE_TRANSFERS in schemas:
        process_native_transfers(traces, columns.native_transfers, schemas)
    if Datatype.TRACES in schemas:
        process_traces(traces, columns.traces, schemas)