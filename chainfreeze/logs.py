"""Event logs as rows, optionally decoded into event parameter columns."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from chainfreeze.records import Log
from chainfreeze.schema import CollectError, ColumnData, Datatype, Table


class LogDecoder(Protocol):
    """Decodes logs of one event; decode raises ValueError for logs it cannot read."""

    input_names: Iterable[str]

    def decode(self, log: Log) -> Mapping[str, Any]: ...


class Logs(ColumnData):
    """Columns for logs."""

    DATATYPE = Datatype.LOGS
    COLUMNS = (
        "block_number",
        "block_hash",
        "transaction_index",
        "log_index",
        "transaction_hash",
        "address",
        "topic0",
        "topic1",
        "topic2",
        "topic3",
        "data",
        "n_data_bytes",
        "chain_id",
    )
    ALIASES = ("events",)
    DEFAULT_COLUMNS = (
        "block_number",
        "transaction_index",
        "log_index",
        "transaction_hash",
        "address",
        "topic0",
        "topic1",
        "topic2",
        "topic3",
        "data",
        "n_data_bytes",
        "chain_id",
    )
    OPTIONAL_PARAMETERS = ("address", "topic0", "topic1", "topic2", "topic3")
    USE_BLOCK_RANGES = True
    ARG_ALIASES = {"contract": "address"}

    def __init__(self) -> None:
        super().__init__()
        self.event_cols: dict[str, list[Any]] = {}


def process_logs(logs: Iterable[Log], columns: Logs, schema: Table) -> None:
    """Append one row per located log; with a decoder, logs it cannot decode are skipped."""
    decoder: LogDecoder | None = schema.log_decoder
    decode_keys = None if decoder is None else set(decoder.input_names)

    for log in logs:
        if None in (log.block_number, log.transaction_hash, log.transaction_index, log.log_index):
            continue

        if decoder is not None and decode_keys is not None:
            try:
                params = decoder.decode(log)
            except (ValueError, CollectError):
                continue
            for name, value in params.items():
                if name in decode_keys:
                    columns.event_cols.setdefault(name, []).append(value)

        data = bytes(log.data)
        columns.n_rows += 1
        columns.store(schema, "block_number", log.block_number)
        columns.store(
            schema, "block_hash", None if log.block_hash is None else bytes(log.block_hash)
        )
        columns.store(schema, "transaction_index", log.transaction_index)
        columns.store(schema, "log_index", log.log_index)
        columns.store(schema, "transaction_hash", bytes(log.transaction_hash))
        columns.store(schema, "address", bytes(log.address))
        columns.store(schema, "data", data)
        columns.store(schema, "n_data_bytes", len(data))
        for i in range(4):
            topic = bytes(log.topics[i]) if i < len(log.topics) else None
            columns.store(schema, f"topic{i}", topic)