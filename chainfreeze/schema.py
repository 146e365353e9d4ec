"""Datatypes, table schemas and the column accumulators shared by all datasets."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping


class Datatype(enum.Enum):
    """Every kind of table that can be collected."""

    ADDRESS_APPEARANCES = "address_appearances"
    BALANCE_DIFFS = "balance_diffs"
    BALANCE_READS = "balance_reads"
    BALANCES = "balances"
    BLOCKS = "blocks"
    CODE_DIFFS = "code_diffs"
    CODE_READS = "code_reads"
    CODES = "codes"
    CONTRACTS = "contracts"
    ERC20_BALANCES = "erc20_balances"
    ERC20_METADATA = "erc20_metadata"
    ERC20_SUPPLIES = "erc20_supplies"
    ERC20_TRANSFERS = "erc20_transfers"
    ERC721_METADATA = "erc721_metadata"
    ERC721_TRANSFERS = "erc721_transfers"
    ETH_CALLS = "eth_calls"
    FOUR_BYTE_COUNTS = "four_byte_counts"
    GETH_BALANCE_DIFFS = "geth_balance_diffs"
    GETH_CALLS = "geth_calls"
    GETH_CODE_DIFFS = "geth_code_diffs"
    GETH_NONCE_DIFFS = "geth_nonce_diffs"
    GETH_OPCODES = "geth_opcodes"
    GETH_STORAGE_DIFFS = "geth_storage_diffs"
    JAVASCRIPT_TRACES = "javascript_traces"
    LOGS = "logs"
    NATIVE_TRANSFERS = "native_transfers"
    NONCE_DIFFS = "nonce_diffs"
    NONCE_READS = "nonce_reads"
    NONCES = "nonces"
    SLOTS = "slots"
    STORAGE_DIFFS = "storage_diffs"
    STORAGE_READS = "storage_reads"
    TRACE_CALLS = "trace_calls"
    TRACES = "traces"
    TRANSACTIONS = "transactions"
    VM_TRACES = "vm_traces"


class CollectError(Exception):
    """Raised when data cannot be collected or shaped into columns."""


@dataclass
class Table:
    """The columns requested for one datatype."""

    datatype: Datatype
    columns: tuple[str, ...]
    sort: tuple[str, ...] | None = None
    log_decoder: Any = None

    def __post_init__(self) -> None:
        self.columns = tuple(self.columns)
        if self.sort is not None:
            self.sort = tuple(self.sort)

    def has_column(self, column: str) -> bool:
        """Whether the table includes the named column."""
        return column in self.columns


Schemas = Mapping[Datatype, Table]


def get_schema(schemas: Schemas, datatype: Datatype) -> Table:
    """Return the schema for a datatype, raising CollectError if it is absent."""
    try:
        return schemas[datatype]
    except KeyError:
        raise CollectError("schema not provided") from None


class ColumnData:
    """Accumulates column values for one datatype, row by row."""

    DATATYPE: ClassVar[Datatype]
    COLUMNS: ClassVar[tuple[str, ...]] = ()
    DEFAULT_COLUMNS: ClassVar[tuple[str, ...] | None] = None
    DEFAULT_SORT: ClassVar[tuple[str, ...] | None] = None
    ALIASES: ClassVar[tuple[str, ...]] = ()
    REQUIRED_PARAMETERS: ClassVar[tuple[str, ...]] = ()
    OPTIONAL_PARAMETERS: ClassVar[tuple[str, ...]] = ()
    ARG_ALIASES: ClassVar[Mapping[str, str]] = {}
    DEFAULT_BLOCKS: ClassVar[str | None] = None
    USE_BLOCK_RANGES: ClassVar[bool] = False

    def __init__(self) -> None:
        self.n_rows = 0
        self.data: dict[str, list[Any]] = {
            name: [] for name in self.COLUMNS if name != "chain_id"
        }

    def __len__(self) -> int:
        return self.n_rows

    def __getitem__(self, name: str) -> list[Any]:
        return self.data[name]

    def store(self, schema: Table, name: str, value: Any) -> None:
        """Append a value to a column, if the schema asks for that column."""
        if not schema.has_column(name):
            return
        try:
            self.data[name].append(value)
        except KeyError:
            raise CollectError(
                f"unknown column for {self.DATATYPE.value}: {name}"
            ) from None

    def to_columns(self, schemas: Schemas, chain_id: int) -> dict[Datatype, dict[str, list[Any]]]:
        """Return the collected columns, in schema order, keyed by datatype."""
        schema = get_schema(schemas, self.DATATYPE)
        output: dict[str, list[Any]] = {}
        for name in schema.columns:
            if name == "chain_id":
                output[name] = [chain_id] * self.n_rows
            elif name in self.data:
                output[name] = list(self.data[name])
            else:
                raise CollectError(f"unknown column for {self.DATATYPE.value}: {name}")
        return {self.DATATYPE: output}