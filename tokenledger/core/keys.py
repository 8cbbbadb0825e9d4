"""Composite state keys.

A composite key is the kind tag and its ordered parameters, each followed
by the reserved separator U+0000, with a leading separator marking the key
as composite: "\\x00balance\\x00alice\\x00". Plain singleton keys
("name", "totalSupply") never start with the separator, so the two
namespaces cannot collide.
"""

from __future__ import annotations

from collections.abc import Sequence

from tokenledger.core.errors import ErrorCode, FieldViolation, ValidationError
from tokenledger.core.result import Err, Ok
from tokenledger.core.types import UtcDatetime

SEPARATOR = "\x00"
_MAX_UNICODE = "\U0010ffff"

# Kind tags
BALANCE_KIND = "balance"
TRANSACTION_DATA_KIND = "transactionData"

# Singleton keys
NAME_KEY = "name"
SYMBOL_KEY = "symbol"
DECIMALS_KEY = "decimals"
TOTAL_SUPPLY_KEY = "totalSupply"


def _violation(path: str, value: str) -> FieldViolation | None:
    if not value:
        return FieldViolation(path=path, constraint="must be non-empty", actual_value=value)
    if SEPARATOR in value or _MAX_UNICODE in value:
        return FieldViolation(
            path=path,
            constraint="must not contain U+0000 or U+10FFFF",
            actual_value=value.replace(SEPARATOR, "\\x00"),
        )
    return None


def create_composite_key(
    kind: str, params: Sequence[str], at: UtcDatetime | None = None,
) -> Ok[str] | Err[ValidationError]:
    """Build the composite key for (kind, params), or INVALID_KEY."""
    violations = [
        v for v in (
            _violation("kind", kind),
            *(_violation(f"params[{i}]", p) for i, p in enumerate(params)),
        )
        if v is not None
    ]
    if violations:
        return Err(ValidationError(
            message=f"Invalid composite key component for kind {kind!r}",
            code=ErrorCode.INVALID_KEY.value,
            timestamp=at if at is not None else UtcDatetime.now(),
            source="core.keys.create_composite_key",
            fields=tuple(violations),
        ))
    return Ok(SEPARATOR + kind + SEPARATOR + "".join(p + SEPARATOR for p in params))


def split_composite_key(key: str) -> tuple[str, tuple[str, ...]] | None:
    """Inverse of create_composite_key. None for plain keys."""
    if not key.startswith(SEPARATOR) or not key.endswith(SEPARATOR):
        return None
    parts = key[1:-1].split(SEPARATOR)
    return parts[0], tuple(parts[1:])
