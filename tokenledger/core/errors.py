"""Error value hierarchy. No engine function raises exceptions.

Every error is a frozen dataclass value that can be pattern-matched,
serialized and stored. Base class TokenError, @final subclasses. The
`code` field carries an ErrorCode value; several codes share a subclass
when they carry the same context (e.g. the three account lookups).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import final

from tokenledger.core.types import UtcDatetime


class ErrorCode(Enum):
    """Stable error codes. Part of the wire contract of InvocationOutput."""

    NOT_INITIALIZED = "NOT_INITIALIZED"
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    SOURCE_ACCOUNT_NOT_FOUND = "SOURCE_ACCOUNT_NOT_FOUND"
    DESTINATION_NOT_SIGNED_UP = "DESTINATION_NOT_SIGNED_UP"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    ARITHMETIC_OVERFLOW = "ARITHMETIC_OVERFLOW"
    ARITHMETIC_UNDERFLOW = "ARITHMETIC_UNDERFLOW"
    SUPPLY_NOT_FOUND = "SUPPLY_NOT_FOUND"
    NO_HISTORY = "NO_HISTORY"
    SELF_TRANSFER_REJECTED = "SELF_TRANSFER_REJECTED"
    INVALID_METADATA = "INVALID_METADATA"
    INVALID_KEY = "INVALID_KEY"
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"
    INVALID_INVOCATION = "INVALID_INVOCATION"
    CONSERVATION_VIOLATION = "CONSERVATION_VIOLATION"
    CORRUPT_STATE = "CORRUPT_STATE"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


@dataclass(frozen=True, slots=True)
class TokenError:
    """Base error value. NOT @final, has subclasses."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> TokenError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to dict with stable keys."""
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class FieldViolation:
    """Describes a single field validation failure."""

    path: str  # e.g. "Initialize.decimals"
    constraint: str  # e.g. "must be a non-negative integer"
    actual_value: str


@final
@dataclass(frozen=True, slots=True)
class ValidationError(TokenError):
    """One or more arguments failed validation (metadata, keys, dispatch)."""

    fields: tuple[FieldViolation, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **TokenError.to_dict(self),
            "fields": [
                {"path": f.path, "constraint": f.constraint, "actual_value": f.actual_value}
                for f in self.fields
            ],
        }


@final
@dataclass(frozen=True, slots=True)
class LifecycleError(TokenError):
    """Contract is in the wrong initialization state for the operation."""

    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**TokenError.to_dict(self), "operation": self.operation}


@final
@dataclass(frozen=True, slots=True)
class UnauthorizedError(TokenError):
    """Caller lacks the capability required by a privileged operation."""

    caller: str
    organization: str
    capability: str

    def to_dict(self) -> dict[str, object]:
        return {
            **TokenError.to_dict(self),
            "caller": self.caller,
            "organization": self.organization,
            "capability": self.capability,
        }


@final
@dataclass(frozen=True, slots=True)
class InvalidAmountError(TokenError):
    """Amount is unparseable, out of range, or not allowed for the operation."""

    amount: str

    def to_dict(self) -> dict[str, object]:
        return {**TokenError.to_dict(self), "amount": self.amount}


@final
@dataclass(frozen=True, slots=True)
class AccountError(TokenError):
    """Account lookup or pairing failed.

    Codes: ACCOUNT_NOT_FOUND, SOURCE_ACCOUNT_NOT_FOUND,
    DESTINATION_NOT_SIGNED_UP, SELF_TRANSFER_REJECTED.
    """

    account: str

    def to_dict(self) -> dict[str, object]:
        return {**TokenError.to_dict(self), "account": self.account}


@final
@dataclass(frozen=True, slots=True)
class InsufficientFundsError(TokenError):
    """Source balance is smaller than the requested amount."""

    account: str
    balance: int
    requested: int

    def to_dict(self) -> dict[str, object]:
        return {
            **TokenError.to_dict(self),
            "account": self.account,
            "balance": str(self.balance),
            "requested": str(self.requested),
        }


@final
@dataclass(frozen=True, slots=True)
class ArithmeticFaultError(TokenError):
    """Checked add/sub left the ledger's integer domain."""

    operation: str  # "add" | "sub"
    left: int
    right: int

    def to_dict(self) -> dict[str, object]:
        return {
            **TokenError.to_dict(self),
            "operation": self.operation,
            "left": str(self.left),
            "right": str(self.right),
        }


@final
@dataclass(frozen=True, slots=True)
class MissingStateError(TokenError):
    """A singleton or history record that must exist is absent."""

    key: str

    def to_dict(self) -> dict[str, object]:
        return {**TokenError.to_dict(self), "key": self.key}


@final
@dataclass(frozen=True, slots=True)
class CorruptStateError(TokenError):
    """Stored bytes do not decode to the expected shape."""

    key: str
    raw: str

    def to_dict(self) -> dict[str, object]:
        return {**TokenError.to_dict(self), "key": self.key, "raw": self.raw}


@final
@dataclass(frozen=True, slots=True)
class ConservationViolationError(TokenError):
    """A conservation law was violated."""

    law_name: str
    expected: str
    actual: str

    def to_dict(self) -> dict[str, object]:
        return {
            **TokenError.to_dict(self),
            "law_name": self.law_name,
            "expected": self.expected,
            "actual": self.actual,
        }


@final
@dataclass(frozen=True, slots=True)
class PersistenceError(TokenError):
    """Host store operation failed (including commit conflicts)."""

    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**TokenError.to_dict(self), "operation": self.operation}
