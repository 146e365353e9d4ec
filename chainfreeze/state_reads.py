"""Balance, code, nonce and storage reads collected from one set of prestate traces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chainfreeze.balance_reads import BalanceReads, PrestateResponse, process_balance_reads
from chainfreeze.code_reads import CodeReads, process_code_reads
from chainfreeze.nonce_reads import NonceReads, process_nonce_reads
from chainfreeze.schema import Datatype, Schemas
from chainfreeze.storage_reads import StorageReads, process_storage_reads


@dataclass
class StateReads:
    """The four state read datasets, filled side by side."""

    balance_reads: BalanceReads = field(default_factory=BalanceReads)
    code_reads: CodeReads = field(default_factory=CodeReads)
    nonce_reads: NonceReads = field(default_factory=NonceReads)
    storage_reads: StorageReads = field(default_factory=StorageReads)

    def to_columns(
        self, schemas: Schemas, chain_id: int
    ) -> dict[Datatype, dict[str, list[Any]]]:
        """Return the columns of every dataset that has a schema."""
        output: dict[Datatype, dict[str, list[Any]]] = {}
        for columns in (self.balance_reads, self.code_reads, self.nonce_reads, self.storage_reads):
            if columns.DATATYPE in schemas:
                output.update(columns.to_columns(schemas, chain_id))
        return output


def process_state_reads(
    response: PrestateResponse, columns: StateReads, schemas: Schemas
) -> None:
    """Feed the prestate traces to each dataset that has a schema."""
    if Datatype.BALANCE_READS in schemas:
        process_balance_reads(response, columns.balance_reads, schemas)
    if Datatype.CODE_READS in schemas:
        process_code_reads(response, columns.code_reads, schemas)
    if Datatype.NONCE_READS in schemas:
        process_nonce_reads(response, columns.nonce_reads, schemas)
    if Datatype.STORAGE_READS in schemas:
        process_storage_reads(response, columns.storage_reads, schemas)