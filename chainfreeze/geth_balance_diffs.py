"""Balance changes taken from geth prestate traces in diff mode."""

from __future__ import annotations

from chainfreeze.schema import ColumnData, Datatype


class GethBalanceDiffs(ColumnData):
    """Columns for balance diffs from geth traces."""

    DATATYPE = Datatype.GETH_BALANCE_DIFFS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "address",
        "from_value",
        "to_value",
        "chain_id",
    )