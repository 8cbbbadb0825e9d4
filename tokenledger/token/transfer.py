"""Transfer Engine: balance movement between two signed-up accounts.

State machine per transfer:
  0. NOT_INITIALIZED gate
  1. SELF_TRANSFER_REJECTED (TransferFrom only)
  2. INVALID_AMOUNT for unparseable or negative values; zero is allowed
  3. SOURCE_ACCOUNT_NOT_FOUND
  4. INSUFFICIENT_FUNDS
  5. DESTINATION_NOT_SIGNED_UP (recipients are never auto-created)
  6. checked sub/add, all reads done before the first write
  7. history append
  8. Ok(True); callers re-query balances

Transfer(to=caller) is not rejected. Source and destination then share a
storage slot, so the move nets to zero and the slot is written once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from tokenledger.core.arithmetic import IntegerDomain
from tokenledger.core.errors import (
    AccountError,
    ConservationViolationError,
    ErrorCode,
    InsufficientFundsError,
    InvalidAmountError,
    TokenError,
)
from tokenledger.core.result import Err, Ok
from tokenledger.infra.config import TokenConfig
from tokenledger.infra.protocols import InvocationContext
from tokenledger.token.accounts import read_balance
from tokenledger.token.history import (
    set_admin_transaction_data,
    set_from_transaction_data,
    set_to_transaction_data,
)
from tokenledger.token.metadata import check_initialized
from tokenledger.token.state import StateAccessor


@final
@dataclass(frozen=True, slots=True)
class BalanceMove:
    """Outcome of a validated move, before history is written."""

    sender: str
    recipient: str
    amount: int
    sender_before: int
    sender_after: int
    recipient_before: int
    recipient_after: int


def _move(
    state: StateAccessor,
    config: TokenConfig,
    sender: str,
    recipient: str,
    raw_value: str | int,
    operation: str,
) -> Ok[BalanceMove] | Err[TokenError]:
    """Steps 2 to 6. Reads both balances, then writes each touched slot once."""
    source = f"token.transfer.{operation}"
    domain = IntegerDomain(config.max_amount)

    match domain.parse_amount(raw_value, state.now, source):
        case Err(e):
            return Err(e)
        case Ok(amount):
            pass
    if amount < 0:
        return Err(InvalidAmountError(
            message=f"transfer amount cannot be negative: {amount}",
            code=ErrorCode.INVALID_AMOUNT.value,
            timestamp=state.now,
            source=source,
            amount=str(amount),
        ))

    match read_balance(state, sender, ErrorCode.SOURCE_ACCOUNT_NOT_FOUND, operation):
        case Err(e):
            return Err(e)
        case Ok((sender_key, sender_before)):
            pass
    if sender_before < amount:
        return Err(InsufficientFundsError(
            message=f"client account {sender} insufficient funds: "
            f"balance {sender_before}, requested {amount}",
            code=ErrorCode.INSUFFICIENT_FUNDS.value,
            timestamp=state.now,
            source=source,
            account=sender,
            balance=sender_before,
            requested=amount,
        ))

    match read_balance(state, recipient, ErrorCode.DESTINATION_NOT_SIGNED_UP, operation):
        case Err(e):
            return Err(e)
        case Ok((recipient_key, recipient_before)):
            pass

    # One entry per storage slot: a self-transfer collapses to one key.
    slots: dict[str, int] = {sender_key: sender_before, recipient_key: recipient_before}
    pre_sigma = sum(slots.values())
    match domain.sub(slots[sender_key], amount, state.now):
        case Err(e):
            return Err(e)
        case Ok(sender_after):
            slots[sender_key] = sender_after
    match domain.add(slots[recipient_key], amount, state.now):
        case Err(e):
            return Err(e)
        case Ok(recipient_after):
            slots[recipient_key] = recipient_after

    post_sigma = sum(slots.values())
    if pre_sigma != post_sigma:
        return Err(ConservationViolationError(
            message=f"Conservation violated moving {amount} from {sender} to {recipient}",
            code=ErrorCode.CONSERVATION_VIOLATION.value,
            timestamp=state.now,
            source=source,
            law_name="transfer-preserves-sum",
            expected=str(pre_sigma),
            actual=str(post_sigma),
        ))

    for key, balance in slots.items():
        match state.write_int(key, balance):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass

    return Ok(BalanceMove(
        sender=sender,
        recipient=recipient,
        amount=amount,
        sender_before=sender_before,
        sender_after=slots[sender_key],
        recipient_before=recipient_before,
        recipient_after=slots[recipient_key],
    ))


def transfer(
    ctx: InvocationContext, config: TokenConfig, to: str, value: str | int,
) -> Ok[bool] | Err[TokenError]:
    """Move value from the caller to `to`; history under `to` only."""
    state = StateAccessor(ctx)
    match check_initialized(state, "Transfer"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match _move(state, config, ctx.identity.get_id(), to, value, "Transfer"):
        case Err(e):
            return Err(e)
        case Ok(move):
            pass
    return set_admin_transaction_data(ctx, config.admin_sentinel, move.recipient, move.amount)


def transfer_from(
    ctx: InvocationContext,
    config: TokenConfig,
    sender: str,
    recipient: str,
    value: str | int,
) -> Ok[bool] | Err[TokenError]:
    """Move value between two named accounts; history under both."""
    state = StateAccessor(ctx)
    match check_initialized(state, "TransferFrom"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    if sender == recipient:
        return Err(AccountError(
            message=f"cannot transfer to and from same client account {sender}",
            code=ErrorCode.SELF_TRANSFER_REJECTED.value,
            timestamp=state.now,
            source="token.transfer.TransferFrom",
            account=sender,
        ))
    match _move(state, config, sender, recipient, value, "TransferFrom"):
        case Err(e):
            return Err(e)
        case Ok(move):
            pass
    match set_from_transaction_data(ctx, move.sender, move.recipient, move.amount):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    return set_to_transaction_data(ctx, move.sender, move.recipient, move.amount)
