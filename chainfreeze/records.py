"""Chain records as returned by a node: blocks, transactions, logs, traces and diffs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

from Crypto.Hash import keccak


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest of the given bytes."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


_ZERO_ADDRESS = bytes(20)
_ZERO_HASH = bytes(32)


class CallType(enum.Enum):
    NONE = "none"
    CALL = "call"
    CALL_CODE = "callcode"
    DELEGATE_CALL = "delegatecall"
    STATIC_CALL = "staticcall"


class RewardType(enum.Enum):
    BLOCK = "block"
    UNCLE = "uncle"
    EMPTY_STEP = "emptyStep"
    EXTERNAL = "external"


class ActionType(enum.Enum):
    CALL = "call"
    CREATE = "create"
    REWARD = "reward"
    SUICIDE = "suicide"


@dataclass
class CallAction:
    from_address: bytes
    to_address: bytes
    value: int = 0
    gas: int = 0
    input: bytes = b""
    call_type: CallType = CallType.CALL


@dataclass
class CreateAction:
    from_address: bytes
    value: int = 0
    gas: int = 0
    init: bytes = b""


@dataclass
class SuicideAction:
    address: bytes
    refund_address: bytes
    balance: int = 0


@dataclass
class RewardAction:
    author: bytes
    value: int = 0
    reward_type: RewardType = RewardType.BLOCK


Action = Union[CallAction, CreateAction, SuicideAction, RewardAction]


@dataclass
class CallResult:
    gas_used: int = 0
    output: bytes = b""


@dataclass
class CreateResult:
    address: bytes
    gas_used: int = 0
    code: bytes = b""


TraceResult = Union[CallResult, CreateResult, None]

_ACTION_TYPES = {
    CallAction: ActionType.CALL,
    CreateAction: ActionType.CREATE,
    SuicideAction: ActionType.SUICIDE,
    RewardAction: ActionType.REWARD,
}


def _action_type_of(action: Action) -> ActionType:
    return _ACTION_TYPES[type(action)]


@dataclass
class Trace:
    """A parity-style call trace located in a block."""

    action: Action
    result: TraceResult = None
    trace_address: list[int] = field(default_factory=list)
    subtraces: int = 0
    transaction_position: int | None = None
    transaction_hash: bytes | None = None
    block_number: int = 0
    block_hash: bytes = _ZERO_HASH
    error: str | None = None
    action_type: ActionType | None = None

    def __post_init__(self) -> None:
        if self.action_type is None:
            self.action_type = _action_type_of(self.action)


@dataclass
class TransactionTrace:
    """A call trace produced by simulating a call."""

    action: Action
    result: TraceResult = None
    trace_address: list[int] = field(default_factory=list)
    subtraces: int = 0
    error: str | None = None
    action_type: ActionType | None = None

    def __post_init__(self) -> None:
        if self.action_type is None:
            self.action_type = _action_type_of(self.action)


@dataclass
class Log:
    address: bytes
    topics: list[bytes] = field(default_factory=list)
    data: bytes = b""
    block_hash: bytes | None = None
    block_number: int | None = None
    transaction_hash: bytes | None = None
    transaction_index: int | None = None
    log_index: int | None = None


@dataclass
class Block:
    hash: bytes | None = None
    parent_hash: bytes = _ZERO_HASH
    uncles_hash: bytes = _ZERO_HASH
    author: bytes | None = None
    state_root: bytes = _ZERO_HASH
    transactions_root: bytes = _ZERO_HASH
    receipts_root: bytes = _ZERO_HASH
    number: int | None = None
    gas_used: int = 0
    gas_limit: int = 0
    extra_data: bytes = b""
    logs_bloom: bytes | None = None
    timestamp: int = 0
    difficulty: int = 0
    total_difficulty: int | None = None
    size: int | None = None
    mix_hash: bytes | None = None
    nonce: bytes | None = None
    base_fee_per_gas: int | None = None
    withdrawals_root: bytes | None = None
    transactions: list = field(default_factory=list)


@dataclass
class Transaction:
    hash: bytes
    nonce: int = 0
    from_address: bytes = _ZERO_ADDRESS
    to_address: bytes | None = None
    value: int = 0
    input: bytes = b""
    gas: int = 0
    gas_price: int | None = None
    transaction_type: int | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None
    block_number: int | None = None
    block_hash: bytes | None = None
    transaction_index: int | None = None
    chain_id: int | None = None
    rlp: bytes = b""


@dataclass
class TransactionReceipt:
    transaction_hash: bytes
    status: int | None = None
    gas_used: int | None = None
    logs: list[Log] = field(default_factory=list)


class DiffKind(enum.Enum):
    SAME = "="
    BORN = "+"
    DIED = "-"
    CHANGED = "*"


@dataclass
class Diff:
    """A change of one value between two states."""

    kind: DiffKind
    from_value: object = None
    to_value: object = None

    @classmethod
    def same(cls) -> Diff:
        return cls(DiffKind.SAME)

    @classmethod
    def born(cls, value: object) -> Diff:
        return cls(DiffKind.BORN, None, value)

    @classmethod
    def died(cls, value: object) -> Diff:
        return cls(DiffKind.DIED, value, None)

    @classmethod
    def changed(cls, from_value: object, to_value: object) -> Diff:
        return cls(DiffKind.CHANGED, from_value, to_value)


@dataclass
class AccountDiff:
    balance: Diff = field(default_factory=Diff.same)
    nonce: Diff = field(default_factory=Diff.same)
    code: Diff = field(default_factory=Diff.same)
    storage: dict[bytes, Diff] = field(default_factory=dict)


@dataclass
class BlockTrace:
    state_diff: dict[bytes, AccountDiff] | None = None
    vm_trace: object = None


@dataclass
class AccountState:
    balance: int | None = None
    code: str | None = None
    nonce: int | None = None
    storage: dict[bytes, bytes] | None = None


@dataclass
class DiffMode:
    pre: dict[bytes, AccountState] = field(default_factory=dict)
    post: dict[bytes, AccountState] = field(default_factory=dict)


@dataclass
class CallFrame:
    typ: str
    from_address: bytes
    to: bytes | str | None = None
    value: int | None = None
    gas: int = 0
    gas_used: int = 0
    input: bytes = b""
    output: bytes | None = None
    error: str | None = None
    calls: list[CallFrame] | None = None