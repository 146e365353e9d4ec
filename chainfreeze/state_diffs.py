"""Balance, code, nonce and storage diffs collected from one set of state diffs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chainfreeze.balance_diffs import BalanceDiffs, StateDiffResponse, process_balance_diffs
from chainfreeze.code_diffs import CodeDiffs, process_code_diffs
from chainfreeze.nonce_diffs import NonceDiffs, process_nonce_diffs
from chainfreeze.schema import Datatype, Schemas
from chainfreeze.storage_diffs import StorageDiffs, process_storage_diffs


@dataclass
class StateDiffs:
    """The four state diff datasets, filled side by side."""

    balance_diffs: BalanceDiffs = field(default_factory=BalanceDiffs)
    code_diffs: CodeDiffs = field(default_factory=CodeDiffs)
    nonce_diffs: NonceDiffs = field(default_factory=NonceDiffs)
    storage_diffs: StorageDiffs = field(default_factory=StorageDiffs)

    def to_columns(
        self, schemas: Schemas, chain_id: int
    ) -> dict[Datatype, dict[str, list[Any]]]:
        """Return the columns of all four datasets."""
        output: dict[Datatype, dict[str, list[Any]]] = {}
        for columns in (self.balance_diffs, self.code_diffs, self.nonce_diffs, self.storage_diffs):
            output.update(columns.to_columns(schemas, chain_id))
        return output


def process_state_diffs(
    response: StateDiffResponse, columns: StateDiffs, schemas: Schemas
) -> None:
    """Feed the state diffs to all four datasets."""
    process_balance_diffs(response, columns.balance_diffs, schemas)
    process_code_diffs(response, columns.code_diffs, schemas)
    process_nonce_diffs(response, columns.nonce_diffs, schemas)
    process_storage_diffs(response, columns.storage_diffs, schemas)