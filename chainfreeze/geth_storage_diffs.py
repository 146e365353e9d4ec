"""Storage slot changes taken from geth prestate traces in diff mode."""

from __future__ import annotations

from chainfreeze.schema import ColumnData, Datatype


class GethStorageDiffs(ColumnData):
    """Columns for storage diffs from geth traces."""

    DATATYPE = Datatype.GETH_STORAGE_DIFFS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "slot",
        "from_value",
        "to_value",
        "chain_id",
    )