"""Balance, code, nonce and storage diffs taken from geth prestate traces in diff mode."""

from __future__ import annotations

import string
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from chainfreeze.geth_balance_diffs import GethBalanceDiffs
from chainfreeze.geth_code_diffs import GethCodeDiffs
from chainfreeze.geth_nonce_diffs import GethNonceDiffs
from chainfreeze.geth_storage_diffs import GethStorageDiffs
from chainfreeze.records import AccountState, DiffMode
from chainfreeze.schema import CollectError, ColumnData, Datatype, Schemas, Table

GethDiffResponse = tuple[int | None, Sequence[bytes | None], Sequence[DiffMode]]
_Location = tuple[int | None, int, bytes | None, bytes]

_BLANK = AccountState()
_ZERO_WORD = bytes(32)


@dataclass
class GethStateDiffs:
    """The four geth diff datasets, filled side by side; any of them may be left out."""

    balance_diffs: GethBalanceDiffs | None = field(default_factory=GethBalanceDiffs)
    code_diffs: GethCodeDiffs | None = field(default_factory=GethCodeDiffs)
    nonce_diffs: GethNonceDiffs | None = field(default_factory=GethNonceDiffs)
    storage_diffs: GethStorageDiffs | None = field(default_factory=GethStorageDiffs)

    def to_columns(
        self, schemas: Schemas, chain_id: int
    ) -> dict[Datatype, dict[str, list[Any]]]:
        """Return the columns of every dataset that is present."""
        output: dict[Datatype, dict[str, list[Any]]] = {}
        for columns in (self.balance_diffs, self.code_diffs, self.nonce_diffs, self.storage_diffs):
            if columns is not None:
                output.update(columns.to_columns(schemas, chain_id))
        return output

    def transform(self, response: GethDiffResponse, schemas: Schemas) -> None:
        """Feed the diffs to every dataset that is present."""
        process_geth_diffs(
            response,
            self.balance_diffs,
            self.code_diffs,
            self.nonce_diffs,
            self.storage_diffs,
            schemas,
        )


def _decode_code(text: str | None, which: str) -> bytes:
    if not text:
        return b""
    digits = text[2:]
    if (
        not text.startswith("0x")
        or len(digits) % 2
        or any(c not in string.hexdigits for c in digits)
    ):
        raise CollectError(f"could not decode {which} code contents")
    return bytes.fromhex(digits)


def _store_location(columns: ColumnData, schema: Table, location: _Location) -> None:
    block_number, transaction_index, transaction_hash, address = location
    columns.store(schema, "block_number", block_number)
    columns.store(schema, "transaction_index", transaction_index)
    columns.store(schema, "transaction_hash", transaction_hash)
    columns.store(schema, "address", address)


def _or(value: Any, default: Any) -> Any:
    return default if value is None else value


def _add_balances(
    pre: AccountState, post: AccountState, columns: GethBalanceDiffs, schema: Table, location: _Location
) -> None:
    columns.n_rows += 1
    _store_location(columns, schema, location)
    columns.store(schema, "from_value", _or(pre.balance, 0))
    columns.store(schema, "to_value", _or(post.balance, 0))


def _add_codes(
    pre: AccountState, post: AccountState, columns: GethCodeDiffs, schema: Table, location: _Location
) -> None:
    from_value = _decode_code(pre.code, "from")
    to_value = _decode_code(post.code, "to")
    columns.n_rows += 1
    _store_location(columns, schema, location)
    columns.store(schema, "from_value", from_value)
    columns.store(schema, "to_value", to_value)


def _add_nonces(
    pre: AccountState, post: AccountState, columns: GethNonceDiffs, schema: Table, location: _Location
) -> None:
    columns.n_rows += 1
    _store_location(columns, schema, location)
    columns.store(schema, "from_value", _or(pre.nonce, 0))
    columns.store(schema, "to_value", _or(post.nonce, 0))


def _add_storages(
    pre: AccountState, post: AccountState, columns: GethStorageDiffs, schema: Table, location: _Location
) -> None:
    pre_slots = {bytes(k): bytes(v) for k, v in (pre.storage or {}).items()}
    post_slots = {bytes(k): bytes(v) for k, v in (post.storage or {}).items()}
    for slot in sorted(pre_slots.keys() | post_slots.keys()):
        columns.n_rows += 1
        _store_location(columns, schema, location)
        columns.store(schema, "slot", slot)
        columns.store(schema, "from_value", pre_slots.get(slot, _ZERO_WORD))
        columns.store(schema, "to_value", post_slots.get(slot, _ZERO_WORD))


def process_geth_diffs(
    response: GethDiffResponse,
    balances: GethBalanceDiffs | None,
    codes: GethCodeDiffs | None,
    nonces: GethNonceDiffs | None,
    storages: GethStorageDiffs | None,
    schemas: Schemas,
) -> None:
    """Append rows for every account touched by each transaction, addresses in order.

    A dataset is filled only when it is given and has a schema.
    """
    block_number, txs, traces = response
    targets = [
        (balances, schemas.get(Datatype.GETH_BALANCE_DIFFS), _add_balances),
        (codes, schemas.get(Datatype.GETH_CODE_DIFFS), _add_codes),
        (nonces, schemas.get(Datatype.GETH_NONCE_DIFFS), _add_nonces),
        (storages, schemas.get(Datatype.GETH_STORAGE_DIFFS), _add_storages),
    ]
    active = [(c, s, add) for c, s, add in targets if c is not None and s is not None]

    for tx_index, (trace, tx) in enumerate(zip(traces, txs)):
        tx_hash = None if tx is None else bytes(tx)
        pre_states: Mapping[bytes, AccountState] = {bytes(a): s for a, s in trace.pre.items()}
        post_states: Mapping[bytes, AccountState] = {bytes(a): s for a, s in trace.post.items()}
        for address in sorted(pre_states.keys() | post_states.keys()):
            pre = pre_states.get(address, _BLANK)
            post = post_states.get(address, _BLANK)
            location = (block_number, tx_index, tx_hash, address)
            for columns, schema, add in active:
                add(pre, post, columns, schema, location)


def transform_balance_diffs(
    response: GethDiffResponse, columns: GethBalanceDiffs, schemas: Schemas
) -> None:
    """Append balance diff rows only."""
    process_geth_diffs(response, columns, None, None, None, schemas)


def transform_code_diffs(
    response: GethDiffResponse, columns: GethCodeDiffs, schemas: Schemas
) -> None:
    """Append code diff rows only."""
    process_geth_diffs(response, None, columns, None, None, schemas)


def transform_nonce_diffs(
    response: GethDiffResponse, columns: GethNonceDiffs, schemas: Schemas
) -> None:
    """Append nonce diff rows only."""
    process_geth_diffs(response, None, None, columns, None, schemas)


def transform_storage_diffs(
    response: GethDiffResponse, columns: GethStorageDiffs, schemas: Schemas
) -> None:
    """Append storage diff rows only."""
    process_geth_diffs(response, None, None, None, columns, schemas)