"""Shared test harness: one in-memory ledger, one contract, named calls."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from tokenledger.core.errors import TokenError
from tokenledger.core.keys import (
    BALANCE_KIND,
    TOTAL_SUPPLY_KEY,
    TRANSACTION_DATA_KIND,
    create_composite_key,
)
from tokenledger.core.result import Err, Ok, Result, unwrap
from tokenledger.core.types import UtcDatetime
from tokenledger.infra.config import TokenConfig
from tokenledger.infra.memory_adapter import InMemoryLedger
from tokenledger.token.contract import TokenContract
from tokenledger.token.policy import AuthorizationPolicy

ADMIN_ID = "x509::/C=TW/O=Org1/CN=minter::/C=TW/O=Org1/CN=ca.org1"
ADMIN_ORG = "Org1MSP"
OTHER_ORG = "Org2MSP"
ALICE = "x509::/C=TW/O=Org2/CN=alice::/C=TW/O=Org2/CN=ca.org2"
BOB = "x509::/C=TW/O=Org2/CN=bob::/C=TW/O=Org2/CN=ca.org2"
CAROL = "x509::/C=TW/O=Org2/CN=carol::/C=TW/O=Org2/CN=ca.org2"

T0 = datetime(2025, 6, 15, 10, 0, 0, tzinfo=UTC)


def at(seconds: int = 0) -> UtcDatetime:
    return UtcDatetime(value=T0 + timedelta(seconds=seconds))


def balance_key(address: str) -> str:
    return unwrap(create_composite_key(BALANCE_KIND, [address]))


def history_key(address: str) -> str:
    return unwrap(create_composite_key(TRANSACTION_DATA_KIND, [address]))


class Harness:
    """Runs each call as its own committed (or discarded) invocation.

    Every call advances the invocation clock by one second unless a
    timestamp is given.
    """

    def __init__(
        self,
        config: TokenConfig | None = None,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self.ledger = InMemoryLedger()
        self.contract = TokenContract(config, policy)
        self.tick = 0

    def call(
        self,
        operation: str,
        *args: Any,
        caller: str = ADMIN_ID,
        org: str = ADMIN_ORG,
        timestamp: UtcDatetime | None = None,
    ) -> Result[Any, TokenError]:
        if timestamp is None:
            self.tick += 1
            timestamp = at(self.tick)
        return self.ledger.invoke(
            lambda ctx: self.contract.dispatch(ctx, operation, args),
            caller_id=caller,
            organization=org,
            timestamp=timestamp,
        )

    def ok(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        result = self.call(operation, *args, **kwargs)
        assert isinstance(result, Ok), f"{operation}{args} failed: {result}"
        return result.value

    def err(self, operation: str, *args: Any, **kwargs: Any) -> TokenError:
        result = self.call(operation, *args, **kwargs)
        assert isinstance(result, Err), f"{operation}{args} unexpectedly succeeded: {result}"
        return result.error

    def initialized(
        self, name: str = "Taiwan Coin", symbol: str = "TWC", decimals: str = "2",
    ) -> Harness:
        self.ok("Initialize", name, symbol, decimals)
        return self

    # --- raw state readers (bypass the contract) ---

    def balance(self, address: str) -> int | None:
        raw = self.ledger.get_raw(balance_key(address))
        return int(raw.decode()) if raw is not None else None

    def supply(self) -> int | None:
        raw = self.ledger.get_raw(TOTAL_SUPPLY_KEY)
        return int(raw.decode()) if raw is not None else None
