"""Token contract and gateway worker configuration.

No client library is imported. Pure configuration data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from tokenledger.core.arithmetic import MAX_SAFE_INTEGER
from tokenledger.core.result import Err, Ok

# ---------------------------------------------------------------------------
# Sentinels and names
# ---------------------------------------------------------------------------

DEFAULT_ADMIN_ORGANIZATION: str = "Org1MSP"
NULL_ADDRESS: str = "0x0"
ADMIN_SENTINEL: str = "admin"
TRANSFER_EVENT: str = "Transfer"

TASK_QUEUE: str = "token-ledger"


# ---------------------------------------------------------------------------
# Contract configuration
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class TokenConfig:
    """Immutable contract configuration.

    strict_burn: when True (default) Burn rejects non-positive amounts and
    amounts above the minter's balance. False reproduces the legacy
    behavior where only the arithmetic bound check applies, so a burn can
    drive the minter's balance and the total supply negative.
    """

    admin_organization: str = DEFAULT_ADMIN_ORGANIZATION
    null_address: str = NULL_ADDRESS
    admin_sentinel: str = ADMIN_SENTINEL
    transfer_event: str = TRANSFER_EVENT
    max_amount: int = MAX_SAFE_INTEGER
    strict_burn: bool = True

    @staticmethod
    def create(
        *,
        admin_organization: str = DEFAULT_ADMIN_ORGANIZATION,
        null_address: str = NULL_ADDRESS,
        admin_sentinel: str = ADMIN_SENTINEL,
        transfer_event: str = TRANSFER_EVENT,
        max_amount: int = MAX_SAFE_INTEGER,
        strict_burn: bool = True,
    ) -> Ok[TokenConfig] | Err[str]:
        """Validated constructor."""
        for label, value in (
            ("admin_organization", admin_organization),
            ("null_address", null_address),
            ("admin_sentinel", admin_sentinel),
            ("transfer_event", transfer_event),
        ):
            if not value.strip():
                return Err(f"TokenConfig.{label} must be non-empty")
        if isinstance(max_amount, bool) or max_amount <= 0:
            return Err(f"TokenConfig.max_amount must be a positive int, got {max_amount!r}")
        return Ok(TokenConfig(
            admin_organization=admin_organization,
            null_address=null_address,
            admin_sentinel=admin_sentinel,
            transfer_event=transfer_event,
            max_amount=max_amount,
            strict_burn=strict_burn,
        ))


# ---------------------------------------------------------------------------
# Gateway worker configuration
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class WorkerConfig:
    """Temporal connection settings for the invocation gateway worker."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = TASK_QUEUE
