"""Temporal activity for the token invocation gateway.

The activity is a thin IO wrapper: all domain logic lives in
TokenContract. It:
- Takes a single frozen-dataclass input
- Resolves the invocation timestamp (client-supplied or host clock)
- Runs the named operation as one ledger invocation
- Returns a frozen-dataclass output, never raises for domain errors
"""

from __future__ import annotations

from datetime import UTC

from dateutil.parser import isoparse
from temporalio import activity

from tokenledger.core.errors import ErrorCode, FieldViolation, TokenError, ValidationError
from tokenledger.core.result import Err, Ok
from tokenledger.core.serialization import canonical_bytes
from tokenledger.core.types import UtcDatetime
from tokenledger.infra.protocols import LedgerHost
from tokenledger.token.contract import TokenContract
from tokenledger.workflow.types import InvocationInput, InvocationOutput


def resolve_timestamp(raw: str) -> Ok[UtcDatetime] | Err[ValidationError]:
    """Parse an ISO-8601 timestamp. Empty means now; naive means UTC."""
    if not raw:
        return Ok(UtcDatetime.now())
    try:
        parsed = isoparse(raw)
    except ValueError as exc:
        return Err(ValidationError(
            message=f"Invalid invocation timestamp {raw!r}: {exc}",
            code=ErrorCode.INVALID_INVOCATION.value,
            timestamp=UtcDatetime.now(),
            source="workflow.activities.resolve_timestamp",
            fields=(FieldViolation(
                path="timestamp", constraint="must be ISO-8601", actual_value=raw,
            ),),
        ))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return Ok(UtcDatetime(value=parsed.astimezone(UTC)))


def _error_fields(error: TokenError) -> dict[str, str]:
    """to_dict() with every non-string value rendered as canonical JSON."""
    fields: dict[str, str] = {}
    for name, value in error.to_dict().items():
        if isinstance(value, str):
            fields[name] = value
            continue
        match canonical_bytes(value):
            case Err(detail):
                raise TypeError(detail)
            case Ok(payload):
                fields[name] = payload.decode("utf-8")
    return fields


def _failed(operation: str, error: TokenError) -> InvocationOutput:
    return InvocationOutput(
        operation=operation,
        committed=False,
        error_code=error.code,
        error_message=error.message,
        error=_error_fields(error),
    )


class TokenActivities:
    """Activities bound to one ledger host and one contract."""

    def __init__(self, ledger: LedgerHost, contract: TokenContract | None = None) -> None:
        self._ledger = ledger
        self._contract = contract if contract is not None else TokenContract()

    @activity.defn(name="invoke_token_operation")
    async def invoke_token_operation(self, inp: InvocationInput) -> InvocationOutput:
        """Run one named operation against the ledger.

        Timeout: 30s | Retries: 0 at this layer (conflicts surface as
        PERSISTENCE_ERROR and are resubmitted by the client).
        """
        activity.logger.info(
            "Invoking %s for %s (%s)", inp.operation, inp.caller_id, inp.organization,
        )

        match resolve_timestamp(inp.timestamp):
            case Err(e):
                activity.logger.warning("Rejected %s: %s", inp.operation, e.message)
                return _failed(inp.operation, e)
            case Ok(ts):
                pass

        result = self._ledger.invoke(
            lambda ctx: self._contract.dispatch(ctx, inp.operation, inp.args),
            caller_id=inp.caller_id,
            organization=inp.organization,
            timestamp=ts,
        )
        match result:
            case Err(e):
                activity.logger.warning(
                    "%s by %s failed with %s: %s",
                    inp.operation, inp.caller_id, e.code, e.message,
                )
                return _failed(inp.operation, e)
            case Ok(value):
                pass

        match canonical_bytes(value):
            case Err(detail):
                raise TypeError(detail)
            case Ok(payload):
                pass
        activity.logger.info("%s by %s committed", inp.operation, inp.caller_id)
        return InvocationOutput(
            operation=inp.operation,
            committed=True,
            result_json=payload.decode("utf-8"),
        )
