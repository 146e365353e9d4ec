"""Counts of called function selectors and call data sizes, from 4byte traces."""

from __future__ import annotations

import re
import string
from collections.abc import Mapping, Sequence

from chainfreeze.balance_reads import _store_transaction
from chainfreeze.schema import CollectError, ColumnData, Datatype, Schemas, get_schema

FourByteResponse = tuple[int | None, Sequence[bytes | None], Sequence[Mapping[str, int]]]

_U64_LIMIT = 1 << 64
_DECIMAL = re.compile(r"\+?[0-9]+")


class FourByteCounts(ColumnData):
    """Columns for four byte counts."""

    DATATYPE = Datatype.FOUR_BYTE_COUNTS
    COLUMNS = (
        "block_number",
        "transaction_index",
        "transaction_hash",
        "signature",
        "size",
        "count",
        "chain_id",
    )
    ALIASES = ("4byte_counts",)


def parse_signature_size(signature_size: str) -> tuple[bytes, int]:
    """Split a "<selector>-<size>" key into the selector bytes and the call data size."""
    hex_part, sep, size_part = signature_size.partition("-")
    if not sep:
        raise CollectError("could not parse 4byte-size pair")

    while hex_part.startswith("0x"):
        hex_part = hex_part[2:]
    if len(hex_part) % 2 or any(c not in string.hexdigits for c in hex_part):
        raise CollectError("could not parse signature bytes")
    signature = bytes.fromhex(hex_part)

    if not _DECIMAL.fullmatch(size_part):
        raise CollectError("could not parse call data size")
    size = int(size_part)
    if size >= _U64_LIMIT:
        raise CollectError("could not parse call data size")
    return signature, size


def process_four_byte_counts(
    response: FourByteResponse, columns: FourByteCounts, schemas: Schemas
) -> None:
    """Append one row per selector and size seen in each transaction, keys in order."""
    schema = get_schema(schemas, Datatype.FOUR_BYTE_COUNTS)
    block_number, txs, traces = response
    for index, (trace, tx) in enumerate(zip(traces, txs)):
        for signature_size, count in sorted(trace.items()):
            signature, size = parse_signature_size(signature_size)
            columns.n_rows += 1
            _store_transaction(columns, schema, block_number, tx, index)
            columns.store(schema, "signature", signature)
            columns.store(schema, "size", size)
            columns.store(schema, "count", count)