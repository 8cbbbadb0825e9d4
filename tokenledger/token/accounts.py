"""Account Registry: signup and balance lookups."""

from __future__ import annotations

from tokenledger.core.errors import AccountError, ErrorCode, TokenError
from tokenledger.core.result import Err, Ok
from tokenledger.infra.protocols import InvocationContext
from tokenledger.token.metadata import check_initialized
from tokenledger.token.state import StateAccessor


def signup(ctx: InvocationContext, address: str) -> Ok[bool] | Err[TokenError]:
    """Create a zero balance for address.

    An existing balance is written back unchanged, so repeated signups
    still touch the key (and conflict with concurrent writers of it).
    """
    state = StateAccessor(ctx)
    match check_initialized(state, "signup"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.balance_key(address):
        case Err(e):
            return Err(e)
        case Ok(key):
            pass
    match state.read_int(key):
        case Err(e):
            return Err(e)
        case Ok(current):
            pass
    return state.write_int(key, current if current is not None else 0).map(lambda _: True)


def read_balance(
    state: StateAccessor, address: str, missing_code: ErrorCode, operation: str,
) -> Ok[tuple[str, int]] | Err[TokenError]:
    """(key, balance) for address, or an AccountError with missing_code."""
    match state.balance_key(address):
        case Err(e):
            return Err(e)
        case Ok(key):
            pass
    match state.read_int(key):
        case Err(e):
            return Err(e)
        case Ok(balance):
            pass
    if balance is None:
        return Err(account_missing(state, address, missing_code, operation))
    return Ok((key, balance))


def account_missing(
    state: StateAccessor, address: str, code: ErrorCode, operation: str,
) -> AccountError:
    detail = {
        ErrorCode.SOURCE_ACCOUNT_NOT_FOUND: f"client account {address} no balance",
        ErrorCode.DESTINATION_NOT_SIGNED_UP: f"client account {address} no signup",
    }.get(code, f"the account {address} does not exist")
    return AccountError(
        message=detail,
        code=code.value,
        timestamp=state.now,
        source=f"token.accounts[{operation}]",
        account=address,
    )


def balance_of(ctx: InvocationContext, owner: str) -> Ok[int] | Err[TokenError]:
    state = StateAccessor(ctx)
    match check_initialized(state, "BalanceOf"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    return read_balance(state, owner, ErrorCode.ACCOUNT_NOT_FOUND, "BalanceOf").map(
        lambda kb: kb[1],
    )


def client_account_balance(ctx: InvocationContext) -> Ok[int] | Err[TokenError]:
    """BalanceOf for the calling identity."""
    state = StateAccessor(ctx)
    match check_initialized(state, "ClientAccountBalance"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    return read_balance(
        state, ctx.identity.get_id(), ErrorCode.ACCOUNT_NOT_FOUND, "ClientAccountBalance",
    ).map(lambda kb: kb[1])


def client_account_id(ctx: InvocationContext) -> Ok[str] | Err[TokenError]:
    state = StateAccessor(ctx)
    return check_initialized(state, "ClientAccountID").map(lambda _: ctx.identity.get_id())
