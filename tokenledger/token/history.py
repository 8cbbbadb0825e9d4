"""Transaction Ledger: append-only per-account transfer history.

Each account owns one JSON array under composite("transactionData",
[address]), oldest record first. Records are never rewritten or removed;
an append re-serializes the whole array. The array is unbounded.

Which sequences a transfer touches depends on the variant:
  - TransferFrom appends under both the source and the destination;
  - Transfer appends one record, from the admin sentinel, under the
    destination only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, final

from tokenledger.core.errors import ErrorCode, MissingStateError, TokenError
from tokenledger.core.result import Err, Ok
from tokenledger.core.serialization import corrupt_state
from tokenledger.infra.protocols import InvocationContext
from tokenledger.token.metadata import check_initialized
from tokenledger.token.state import StateAccessor

_WIRE_FIELDS = ("from", "to", "value", "time")


@final
@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """One history entry. All fields are strings on the wire."""

    sender: str
    recipient: str
    value: str  # decimal-string integer
    time: str  # epoch seconds, decimal string

    def to_wire(self) -> dict[str, str]:
        return {"from": self.sender, "to": self.recipient, "value": self.value, "time": self.time}

    @staticmethod
    def from_wire(raw: object) -> Ok[TransactionRecord] | Err[str]:
        if not isinstance(raw, dict):
            return Err(f"history record must be an object, got {type(raw).__name__}")
        missing = [f for f in _WIRE_FIELDS if f not in raw]
        if missing:
            return Err(f"history record missing fields {missing}")
        return Ok(TransactionRecord(
            sender=str(raw["from"]),
            recipient=str(raw["to"]),
            value=str(raw["value"]),
            time=str(raw["time"]),
        ))


def _append(
    state: StateAccessor, address: str, record: TransactionRecord, operation: str,
) -> Ok[bool] | Err[TokenError]:
    match check_initialized(state, operation):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.history_key(address):
        case Err(e):
            return Err(e)
        case Ok(key):
            pass
    match state.read_json(key):
        case Err(e):
            return Err(e)
        case Ok(existing):
            pass
    if existing is None:
        sequence: list[Any] = []
    elif isinstance(existing, list):
        sequence = existing
    else:
        return Err(corrupt_state(key, type(existing).__name__, "history is not an array", state.now))
    sequence.append(record.to_wire())
    return state.write_json(key, sequence).map(lambda _: True)


def _record(state: StateAccessor, sender: str, recipient: str, value: int) -> TransactionRecord:
    return TransactionRecord(
        sender=sender, recipient=recipient, value=str(value), time=state.now.epoch_seconds(),
    )


def set_from_transaction_data(
    ctx: InvocationContext, sender: str, recipient: str, value: int,
) -> Ok[bool] | Err[TokenError]:
    """Append {from: sender, to: recipient} under the sender."""
    state = StateAccessor(ctx)
    return _append(
        state, sender, _record(state, sender, recipient, value), "setFromTransactionData",
    )


def set_to_transaction_data(
    ctx: InvocationContext, sender: str, recipient: str, value: int,
) -> Ok[bool] | Err[TokenError]:
    """Append {from: sender, to: recipient} under the recipient."""
    state = StateAccessor(ctx)
    return _append(
        state, recipient, _record(state, sender, recipient, value), "setToTransactionData",
    )


def set_admin_transaction_data(
    ctx: InvocationContext, admin_sentinel: str, recipient: str, value: int,
) -> Ok[bool] | Err[TokenError]:
    """Append {from: admin_sentinel, to: recipient} under the recipient."""
    state = StateAccessor(ctx)
    return _append(
        state,
        recipient,
        _record(state, admin_sentinel, recipient, value),
        "setAdminTransactionData",
    )


def get_transaction_data(
    ctx: InvocationContext, address: str,
) -> Ok[tuple[TransactionRecord, ...]] | Err[TokenError]:
    """Full history for address, oldest first. NO_HISTORY if never touched."""
    state = StateAccessor(ctx)
    match check_initialized(state, "getTransactionData"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.history_key(address):
        case Err(e):
            return Err(e)
        case Ok(key):
            pass
    match state.read_json(key):
        case Err(e):
            return Err(e)
        case Ok(existing):
            pass
    if existing is None:
        return Err(MissingStateError(
            message=f"client account {address} has no transaction history",
            code=ErrorCode.NO_HISTORY.value,
            timestamp=state.now,
            source="token.history.get_transaction_data",
            key=key,
        ))
    if not isinstance(existing, list):
        return Err(corrupt_state(key, type(existing).__name__, "history is not an array", state.now))
    records: list[TransactionRecord] = []
    for i, raw in enumerate(existing):
        match TransactionRecord.from_wire(raw):
            case Err(detail):
                return Err(corrupt_state(key, str(raw), f"record {i}: {detail}", state.now))
            case Ok(record):
                records.append(record)
    return Ok(tuple(records))
