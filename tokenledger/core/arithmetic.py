"""Overflow-checked integer arithmetic over the ledger's bounded domain.

Python ints never wrap, so the round-trip identity a fixed-width domain
uses to detect overflow (a == c - b and b == c - a) always holds here.
Instead, operands and results are bound-checked against the declared
maximum, which gives the same observable failures.

sub() does NOT reject a mathematically negative result on its own.
Callers enforce "no negative balance" with explicit pre-checks.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import final

from tokenledger.core.errors import ArithmeticFaultError, ErrorCode, InvalidAmountError
from tokenledger.core.result import Err, Ok
from tokenledger.core.types import UtcDatetime

# Largest integer the deployed ledger represents exactly.
MAX_SAFE_INTEGER: int = 2**53 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


@final
@dataclass(frozen=True, slots=True)
class IntegerDomain:
    """Closed integer interval [-max_value, max_value]."""

    max_value: int = MAX_SAFE_INTEGER

    def __post_init__(self) -> None:
        if self.max_value <= 0:
            raise ValueError(f"IntegerDomain requires max_value > 0, got {self.max_value}")

    def contains(self, n: int) -> bool:
        return -self.max_value <= n <= self.max_value

    def add(
        self, a: int, b: int, at: UtcDatetime,
    ) -> Ok[int] | Err[ArithmeticFaultError]:
        """c = a + b, or ARITHMETIC_OVERFLOW if any value leaves the domain."""
        c = a + b
        if not (self.contains(a) and self.contains(b) and self.contains(c)):
            return Err(_fault(ErrorCode.ARITHMETIC_OVERFLOW, "add", a, b, at))
        return Ok(c)

    def sub(
        self, a: int, b: int, at: UtcDatetime,
    ) -> Ok[int] | Err[ArithmeticFaultError]:
        """c = a - b, or ARITHMETIC_UNDERFLOW if any value leaves the domain."""
        c = a - b
        if not (self.contains(a) and self.contains(b) and self.contains(c)):
            return Err(_fault(ErrorCode.ARITHMETIC_UNDERFLOW, "sub", a, b, at))
        return Ok(c)

    def parse_amount(
        self, raw: object, at: UtcDatetime, source: str,
    ) -> Ok[int] | Err[InvalidAmountError]:
        """Parse an invocation amount argument.

        Accepts an int (bool excluded) or a decimal integer string with an
        optional sign. Sign checks are the caller's business: transfers
        allow zero, mint requires > 0.
        """
        if isinstance(raw, bool):
            return Err(_invalid(repr(raw), "amount must be an integer", at, source))
        if isinstance(raw, int):
            value = raw
        elif isinstance(raw, str) and _INTEGER_RE.fullmatch(raw.strip()):
            # Reject by digit count before int() can hit the str-conversion limit.
            digits = raw.strip().lstrip("+-").lstrip("0")
            if len(digits) > len(str(self.max_value)):
                return Err(_invalid(
                    raw, f"amount magnitude exceeds {self.max_value}", at, source,
                ))
            value = int(digits or "0")
            if raw.strip().startswith("-"):
                value = -value
        else:
            return Err(_invalid(str(raw), "amount must be an integer", at, source))
        if not self.contains(value):
            return Err(_invalid(
                describe_integer(raw), f"amount magnitude exceeds {self.max_value}", at, source,
            ))
        return Ok(value)


def describe_integer(raw: object) -> str:
    """str(raw), except for ints too long to render as decimal text."""
    if isinstance(raw, int) and raw.bit_length() > 64:
        return f"<{raw.bit_length()}-bit integer>"
    return str(raw)


def _fault(
    code: ErrorCode, operation: str, a: int, b: int, at: UtcDatetime,
) -> ArithmeticFaultError:
    symbol = "+" if operation == "add" else "-"
    kind = "overflow" if operation == "add" else "underflow"
    return ArithmeticFaultError(
        message=f"Math: {'addition' if operation == 'add' else 'subtraction'} "
        f"{kind} occurred {a} {symbol} {b}",
        code=code.value,
        timestamp=at,
        source=f"core.arithmetic.IntegerDomain.{operation}",
        operation=operation,
        left=a,
        right=b,
    )


def _invalid(
    raw: str, reason: str, at: UtcDatetime, source: str,
) -> InvalidAmountError:
    return InvalidAmountError(
        message=f"Invalid amount {raw!r}: {reason}",
        code=ErrorCode.INVALID_AMOUNT.value,
        timestamp=at,
        source=source,
        amount=raw,
    )
