"""ERC20 token transfers taken from Transfer event logs."""

from __future__ import annotations

from collections.abc import Iterable

from chainfreeze.address_appearances import EVENT_ERC20_TRANSFER
from chainfreeze.records import Log
from chainfreeze.schema import CollectError, ColumnData, Datatype, Table


class Erc20Transfers(ColumnData):
    """Columns for ERC20 transfers."""

    DATATYPE = Datatype.ERC20_TRANSFERS
    COLUMNS = (
        "block_number",
        "block_hash",
        "transaction_index",
        "log_index",
        "transaction_hash",
        "erc20",
        "from_address",
        "to_address",
        "value",
        "chain_id",
    )
    DEFAULT_COLUMNS = (
        "block_number",
        "transaction_index",
        "log_index",
        "transaction_hash",
        "erc20",
        "from_address",
        "to_address",
        "value",
        "chain_id",
    )
    OPTIONAL_PARAMETERS = (
        "address",
        "topic0",
        "topic1",
        "topic2",
        "from_address",
        "to_address",
    )
    USE_BLOCK_RANGES = True
    ARG_ALIASES = {"contract": "address"}


def _address_topic(address: bytes) -> bytes:
    address = bytes(address)
    if len(address) != 20:
        raise CollectError("address must be 20 bytes")
    return bytes(12) + address


def transfer_topics(
    from_address: bytes | None, to_address: bytes | None
) -> list[bytes | None]:
    """Topic filter for Transfer events, optionally fixing the sender and recipient."""
    return [
        EVENT_ERC20_TRANSFER,
        None if from_address is None else _address_topic(from_address),
        None if to_address is None else _address_topic(to_address),
        None,
    ]


def is_erc20_transfer(log: Log) -> bool:
    """Whether a log is an ERC20 Transfer event (three topics, one 32-byte word of data)."""
    return (
        len(log.topics) == 3
        and len(log.data) == 32
        and bytes(log.topics[0]) == EVENT_ERC20_TRANSFER
    )


def process_erc20_transfers(
    logs: Iterable[Log], columns: Erc20Transfers, schema: Table
) -> None:
    """Append one row per located transfer log."""
    for log in logs:
        if None in (log.block_number, log.transaction_hash, log.transaction_index, log.log_index):
            continue
        columns.n_rows += 1
        columns.store(schema, "block_number", log.block_number)
        columns.store(
            schema, "block_hash", None if log.block_hash is None else bytes(log.block_hash)
        )
        columns.store(schema, "transaction_index", log.transaction_index)
        columns.store(schema, "log_index", log.log_index)
        columns.store(schema, "transaction_hash", bytes(log.transaction_hash))
        columns.store(schema, "erc20", bytes(log.address))
        columns.store(schema, "from_address", bytes(log.topics[1])[12:])
        columns.store(schema, "to_address", bytes(log.topics[2])[12:])
        columns.store(schema, "value", int.from_bytes(bytes(log.data), "big"))