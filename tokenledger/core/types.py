"""Core value types: UtcDatetime and the ledger's epoch-seconds encoding."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import final


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """Timezone-aware UTC datetime. Naive datetimes are rejected."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise TypeError("UtcDatetime requires timezone-aware datetime, got naive")

    @staticmethod
    def now() -> UtcDatetime:
        """Current UTC time. Hosts only: the engine reads the invocation timestamp."""
        return UtcDatetime(value=datetime.now(tz=UTC))

    def epoch_seconds(self) -> str:
        """Whole seconds since the epoch as a decimal string (history `time` field)."""
        return str(int(self.value.timestamp()))
