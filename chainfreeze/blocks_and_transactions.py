"""Blocks and their transactions collected together."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chainfreeze.blocks import Blocks, process_block
from chainfreeze.records import Block, Transaction, TransactionReceipt
from chainfreeze.schema import Datatype, Schemas, get_schema
from chainfreeze.transactions import (
    BlockResponse,
    Transactions,
    process_transaction,
    transform_block_response,
)

TransactionResponse = tuple[
    Block, tuple[tuple[Transaction, "TransactionReceipt | None"], bool, int]
]


@dataclass
class BlocksAndTransactions:
    """The blocks and transactions datasets, filled side by side."""

    blocks: Blocks = field(default_factory=Blocks)
    transactions: Transactions = field(default_factory=Transactions)

    def to_columns(
        self, schemas: Schemas, chain_id: int
    ) -> dict[Datatype, dict[str, list[Any]]]:
        """Return the columns of both datasets."""
        output: dict[Datatype, dict[str, list[Any]]] = {}
        output.update(self.blocks.to_columns(schemas, chain_id))
        output.update(self.transactions.to_columns(schemas, chain_id))
        return output


def transform_by_block(
    response: BlockResponse, columns: BlocksAndTransactions, schemas: Schemas
) -> None:
    """Append the block and each of its transactions."""
    block = response[0]
    process_block(block, columns.blocks, get_schema(schemas, Datatype.BLOCKS))
    transform_block_response(
        response, columns.transactions, get_schema(schemas, Datatype.TRANSACTIONS)
    )


def transform_by_transaction(
    response: TransactionResponse, columns: BlocksAndTransactions, schemas: Schemas
) -> None:
    """Append a transaction and the block that holds it."""
    block, ((tx, receipt), exclude_failed, timestamp) = response
    process_block(block, columns.blocks, get_schema(schemas, Datatype.BLOCKS))
    process_transaction(
        tx,
        receipt,
        columns.transactions,
        get_schema(schemas, Datatype.TRANSACTIONS),
        exclude_failed,
        timestamp,
    )