"""Metadata Manager: one-time initialization and the read-only accessors.

The presence of the `name` key is the initialization flag. Initialize can
succeed at most once for the lifetime of the ledger; there is no reset.
"""

from __future__ import annotations

import re

from tokenledger.core.arithmetic import MAX_SAFE_INTEGER, describe_integer
from tokenledger.core.errors import (
    ErrorCode,
    FieldViolation,
    LifecycleError,
    MissingStateError,
    TokenError,
    ValidationError,
)
from tokenledger.core.keys import DECIMALS_KEY, NAME_KEY, SYMBOL_KEY, TOTAL_SUPPLY_KEY
from tokenledger.core.result import Err, Ok
from tokenledger.core.serialization import corrupt_state
from tokenledger.infra.protocols import InvocationContext
from tokenledger.token.policy import AuthorizationPolicy, Capability, require
from tokenledger.token.state import StateAccessor

_DECIMALS_RE = re.compile(r"[0-9]+")


def check_initialized(state: StateAccessor, operation: str) -> Ok[None] | Err[TokenError]:
    """NOT_INITIALIZED unless Initialize has committed."""
    match state.exists(NAME_KEY):
        case Err(e):
            return Err(e)
        case Ok(initialized):
            pass
    if not initialized:
        return Err(LifecycleError(
            message="contract options need to be set before calling any function, "
            "call Initialize() to initialize contract",
            code=ErrorCode.NOT_INITIALIZED.value,
            timestamp=state.now,
            source=f"token.metadata.check_initialized[{operation}]",
            operation=operation,
        ))
    return Ok(None)


def _validate_metadata(
    name: str, symbol: str, decimals: object, state: StateAccessor,
) -> Ok[int] | Err[ValidationError]:
    violations: list[FieldViolation] = []
    if not isinstance(name, str) or not name.strip():
        violations.append(FieldViolation(
            path="Initialize.name", constraint="must be non-empty", actual_value=str(name),
        ))
    if not isinstance(symbol, str) or not symbol.strip():
        violations.append(FieldViolation(
            path="Initialize.symbol", constraint="must be non-empty", actual_value=str(symbol),
        ))
    parsed: int | None = None
    if isinstance(decimals, int) and not isinstance(decimals, bool):
        parsed = decimals
    elif (
        isinstance(decimals, str)
        and _DECIMALS_RE.fullmatch(decimals.strip())
        and len(decimals.strip().lstrip("0")) <= len(str(MAX_SAFE_INTEGER))
    ):
        parsed = int(decimals.strip().lstrip("0") or "0")
    if parsed is None or not 0 <= parsed <= MAX_SAFE_INTEGER:
        parsed = None
        violations.append(FieldViolation(
            path="Initialize.decimals",
            constraint=f"must be an integer in [0, {MAX_SAFE_INTEGER}]",
            actual_value=describe_integer(decimals),
        ))
    if violations or parsed is None:
        return Err(ValidationError(
            message="Token metadata validation failed",
            code=ErrorCode.INVALID_METADATA.value,
            timestamp=state.now,
            source="token.metadata.initialize",
            fields=tuple(violations),
        ))
    return Ok(parsed)


def initialize(
    ctx: InvocationContext,
    policy: AuthorizationPolicy,
    name: str,
    symbol: str,
    decimals: str | int,
) -> Ok[bool] | Err[TokenError]:
    """Write name/symbol/decimals once.

    Order of checks: authorization, then ALREADY_INITIALIZED, then
    argument validation.
    """
    state = StateAccessor(ctx)
    match require(
        policy, ctx.identity, Capability.INITIALIZE, state.now, "token.metadata.initialize",
    ):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass

    match state.exists(NAME_KEY):
        case Err(e):
            return Err(e)
        case Ok(already):
            pass
    if already:
        return Err(LifecycleError(
            message="contract options are already set, client is not authorized to change them",
            code=ErrorCode.ALREADY_INITIALIZED.value,
            timestamp=state.now,
            source="token.metadata.initialize",
            operation="Initialize",
        ))

    match _validate_metadata(name, symbol, decimals, state):
        case Err(e):
            return Err(e)
        case Ok(decimals_int):
            pass

    for key, value in ((NAME_KEY, name), (SYMBOL_KEY, symbol), (DECIMALS_KEY, str(decimals_int))):
        match state.write_text(key, value):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass
    return Ok(True)


def _read_metadata_text(
    ctx: InvocationContext, key: str, operation: str,
) -> Ok[str] | Err[TokenError]:
    state = StateAccessor(ctx)
    match check_initialized(state, operation):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.read_text(key):
        case Err(e):
            return Err(e)
        case Ok(text):
            pass
    if text is None:
        return Err(corrupt_state(key, "", "metadata field missing after Initialize", state.now))
    return Ok(text)


def token_name(ctx: InvocationContext) -> Ok[str] | Err[TokenError]:
    return _read_metadata_text(ctx, NAME_KEY, "TokenName")


def symbol(ctx: InvocationContext) -> Ok[str] | Err[TokenError]:
    return _read_metadata_text(ctx, SYMBOL_KEY, "Symbol")


def decimals(ctx: InvocationContext) -> Ok[int] | Err[TokenError]:
    state = StateAccessor(ctx)
    match check_initialized(state, "Decimals"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.read_int(DECIMALS_KEY):
        case Err(e):
            return Err(e)
        case Ok(value):
            pass
    if value is None:
        return Err(corrupt_state(DECIMALS_KEY, "", "metadata field missing after Initialize", state.now))
    return Ok(value)


def total_supply(ctx: InvocationContext) -> Ok[int] | Err[TokenError]:
    """Current supply. Before the first Mint this is SUPPLY_NOT_FOUND, not 0."""
    state = StateAccessor(ctx)
    match check_initialized(state, "TotalSupply"):
        case Err(e):
            return Err(e)
        case Ok(_):
            pass
    match state.read_int(TOTAL_SUPPLY_KEY):
        case Err(e):
            return Err(e)
        case Ok(value):
            pass
    if value is None:
        return Err(supply_not_found(state))
    return Ok(value)


def supply_not_found(state: StateAccessor) -> MissingStateError:
    return MissingStateError(
        message="totalSupply does not exist",
        code=ErrorCode.SUPPLY_NOT_FOUND.value,
        timestamp=state.now,
        source="token.metadata",
        key=TOTAL_SUPPLY_KEY,
    )
