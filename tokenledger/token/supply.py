"""Supply Controller: privileged Mint and Burn.

Both operate on the caller's own balance and the totalSupply singleton,
and emit a `Transfer` event against the null address:

  Mint: {"from": null_address, "to": minter, "value": amount}
  Burn: {"from": minter, "to": null_address, "value": amount}

Events are buffered by the host and delivered only if the invocation
commits.
"""

from __future__ import annotations

from tokenledger.core.arithmetic import IntegerDomain
from tokenledger.core.errors import (
    ErrorCode,
    InsufficientFundsError,
    InvalidAmountError,
    TokenError,
)
from tokenledger.core.keys import TOTAL_SUPPLY_KEY
from tokenledger.core.result import Err, Ok
from tokenledger.core.serialization import encode_json
from tokenledger.infra.config import TokenConfig
from tokenledger.infra.protocols import InvocationContext
from tokenledger.token.accounts import read_balance
from tokenledger.token.metadata import check_initialized, supply_not_found
from tokenledger.token.policy import AuthorizationPolicy, Capability, require
from tokenledger.token.state import StateAccessor


def _emit_transfer(
    ctx: InvocationContext, config: TokenConfig, sender: str, recipient: str, amount: int,
) -> Ok[None] | Err[TokenError]:
    match encode_json(
        {"from": sender, "to": recipient, "value": amount}, config.transfer_event, ctx.timestamp,
    ):
        case Err(e):
            return Err(e)
        case Ok(payload):
            pass
    return ctx.events.emit(config.transfer_event, payload)


def _non_positive(amount: int, operation: str, state: StateAccessor) -> InvalidAmountError:
    return InvalidAmountError(
        message=f"{operation.lower()} amount must be a positive integer, got {amount}",
        code=ErrorCode.INVALID_AMOUNT.value,
        timestamp=state.now,
        source=f"token.supply.{operation}",
        amount=str(amount),
    )


def mint(
    ctx: InvocationContext,
    config: TokenConfig,
    policy: AuthorizationPolicy,
    amount: str | int,
) -> Ok[bool] | Err[TokenError]:
    """Credit amount to the caller and to totalSupply.

    A missing minter balance or missing supply counts as 0: minting
    implicitly signs the minter up and creates the supply record.
    """
    state = StateAccessor(ctx)
    domain = IntegerDomain(config.max_amount)
    match check_initialized(state, "Mint"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match require(policy, ctx.identity, Capability.MINT, state.now, "token.supply.Mint"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match domain.parse_amount(amount, state.now, "token.supply.Mint"):
        case Err(e):
            return Err(e)
        case Ok(value):
            pass
    if value <= 0:
        return Err(_non_positive(value, "Mint", state))

    minter = ctx.identity.get_id()
    match state.balance_key(minter):
        case Err(e):
            return Err(e)
        case Ok(balance_key):
            pass
    match state.read_int(balance_key):
        case Err(e):
            return Err(e)
        case Ok(current):
            pass
    match state.read_int(TOTAL_SUPPLY_KEY):
        case Err(e):
            return Err(e)
        case Ok(supply):
            pass

    match domain.add(current or 0, value, state.now):
        case Err(e):
            return Err(e)
        case Ok(updated_balance):
            pass
    match domain.add(supply or 0, value, state.now):
        case Err(e):
            return Err(e)
        case Ok(updated_supply):
            pass

    match state.write_int(balance_key, updated_balance):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.write_int(TOTAL_SUPPLY_KEY, updated_supply):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    return _emit_transfer(ctx, config, config.null_address, minter, value).map(lambda _: True)


def burn(
    ctx: InvocationContext,
    config: TokenConfig,
    policy: AuthorizationPolicy,
    amount: str | int,
) -> Ok[bool] | Err[TokenError]:
    """Debit amount from the caller and from totalSupply.

    With config.strict_burn the amount must be positive and covered by the
    minter's balance. Without it only the arithmetic bound check applies.
    """
    state = StateAccessor(ctx)
    domain = IntegerDomain(config.max_amount)
    match check_initialized(state, "Burn"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match require(policy, ctx.identity, Capability.BURN, state.now, "token.supply.Burn"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match domain.parse_amount(amount, state.now, "token.supply.Burn"):
        case Err(e):
            return Err(e)
        case Ok(value):
            pass
    if config.strict_burn and value <= 0:
        return Err(_non_positive(value, "Burn", state))

    minter = ctx.identity.get_id()
    match read_balance(state, minter, ErrorCode.ACCOUNT_NOT_FOUND, "Burn"):
        case Err(e):
            return Err(e)
        case Ok((balance_key, current)):
            pass
    match state.read_int(TOTAL_SUPPLY_KEY):
        case Err(e):
            return Err(e)
        case Ok(supply):
            pass
    if supply is None:
        return Err(supply_not_found(state))
    if config.strict_burn and current < value:
        return Err(InsufficientFundsError(
            message=f"minter account {minter} cannot burn {value}: balance {current}",
            code=ErrorCode.INSUFFICIENT_FUNDS.value,
            timestamp=state.now,
            source="token.supply.Burn",
            account=minter,
            balance=current,
            requested=value,
        ))

    match domain.sub(current, value, state.now):
        case Err(e):
            return Err(e)
        case Ok(updated_balance):
            pass
    match domain.sub(supply, value, state.now):
        case Err(e):
            return Err(e)
        case Ok(updated_supply):
            pass

    match state.write_int(balance_key, updated_balance):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.write_int(TOTAL_SUPPLY_KEY, updated_supply):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    return _emit_transfer(ctx, config, minter, config.null_address, value).map(lambda _: True)
