"""Every address that appears in a block, with how it appeared."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence

from chainfreeze.records import (
    Block,
    CallAction,
    CreateAction,
    CreateResult,
    Log,
    RewardAction,
    SuicideAction,
    Trace,
    keccak256,
)
from chainfreeze.schema import ColumnData, Datatype, Table

EVENT_ERC20_TRANSFER = keccak256(b"Transfer(address,address,uint256)")


class AddressAppearances(ColumnData):
    """Columns for address appearances."""

    DATATYPE = Datatype.ADDRESS_APPEARANCES
    COLUMNS = (
        "block_number",
        "block_hash",
        "transaction_hash",
        "address",
        "relationship",
        "chain_id",
    )
    DEFAULT_COLUMNS = (
        "block_number",
        "transaction_hash",
        "address",
        "relationship",
        "chain_id",
    )
    DEFAULT_SORT = ("block_number", "transaction_hash", "address", "relationship")

    def process_first_transaction(
        self,
        block_author: bytes,
        trace: Trace,
        schema: Table,
        tx_hash: bytes,
        logs_by_tx: Mapping[bytes, Sequence[Log]],
    ) -> None:
        """Record the appearances tied to the first trace of a transaction."""
        block_number = trace.block_number
        block_hash = bytes(trace.block_hash)

        def add(address: bytes, relationship: str) -> None:
            self.process_address(
                address, relationship, block_number, block_hash, tx_hash, schema
            )

        add(block_author, "miner_fee")

        for log in logs_by_tx.get(tx_hash, ()):
            if len(log.topics) < 3:
                continue
            name = transfer_name(log)
            if name is None:
                continue
            sender = bytes(log.topics[1])[12:32]
            name = name + "_from"
            add(sender, name)
            recipient = bytes(log.topics[1])[12:32]
            name = name + "_to"
            add(recipient, name)

        action = trace.action
        if isinstance(action, CallAction):
            add(action.from_address, "tx_from")
            add(action.to_address, "tx_to")
        elif isinstance(action, CreateAction):
            add(action.from_address, "tx_from")

        if isinstance(trace.result, CreateResult):
            add(trace.result.address, "tx_to")

    def process_trace(self, trace: Trace, schema: Table, tx_hash: bytes) -> None:
        """Record the appearances of one trace."""
        block_number = trace.block_number
        block_hash = bytes(trace.block_hash)

        def add(address: bytes, relationship: str) -> None:
            self.process_address(
                address, relationship, block_number, block_hash, tx_hash, schema
            )

        action = trace.action
        if isinstance(action, CallAction):
            add(action.from_address, "call_from")
            add(action.to_address, "call_to")
        elif isinstance(action, CreateAction):
            add(action.from_address, "factory")
        elif isinstance(action, SuicideAction):
            add(action.address, "suicide")
            add(action.refund_address, "suicide_refund")
        elif isinstance(action, RewardAction):
            add(action.author, "author")

        if isinstance(trace.result, CreateResult):
            add(trace.result.address, "create")

    def process_address(
        self,
        address: bytes,
        relationship: str,
        block_number: int,
        block_hash: bytes,
        transaction_hash: bytes,
        schema: Table,
    ) -> None:
        """Append one appearance row."""
        self.n_rows += 1
        self.store(schema, "address", bytes(address))
        self.store(schema, "relationship", relationship)
        self.store(schema, "block_number", block_number)
        self.store(schema, "block_hash", bytes(block_hash))
        self.store(schema, "transaction_hash", bytes(transaction_hash))


def transfer_name(log: Log) -> str | None:
    """Name the kind of token transfer a log records, if it records one."""
    if not log.topics or bytes(log.topics[0]) != EVENT_ERC20_TRANSFER:
        return None
    if len(log.data) > 0:
        return "erc20_transfer"
    if len(log.topics) == 4:
        return "erc721_transfer"
    return None


def process_appearances(
    response: tuple[Block, Sequence[Log], Sequence[Trace]],
    columns: AddressAppearances,
    schema: Table,
) -> None:
    """Append the appearances found in a block's logs and traces."""
    block, logs, traces = response
    logs_by_tx: dict[bytes, list[Log]] = defaultdict(list)
    for log in logs:
        if log.transaction_hash is not None:
            logs_by_tx[bytes(log.transaction_hash)].append(log)

    if block.number is None or block.author is None:
        return
    block_author = bytes(block.author)

    current_tx_hash = bytes(32)
    for trace in traces:
        if trace.transaction_hash is None or trace.transaction_position is None:
            continue
        tx_hash = bytes(trace.transaction_hash)
        if tx_hash != current_tx_hash:
            columns.process_first_transaction(block_author, trace, schema, tx_hash, logs_by_tx)
        columns.process_trace(trace, schema, tx_hash)
        current_tx_hash = tx_hash