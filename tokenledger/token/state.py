"""State Accessor: typed reads and writes over an invocation's store.

Maps logical entities (balance of an address, history of an address, the
metadata and supply singletons) to storage keys and decodes the stored
bytes. Holds no state of its own beyond the invocation it wraps.
"""

from __future__ import annotations

from typing import Any, final

from tokenledger.core.errors import TokenError
from tokenledger.core.keys import BALANCE_KIND, TRANSACTION_DATA_KIND
from tokenledger.core.result import Err, Ok
from tokenledger.core.serialization import decode_int, decode_json, encode_int, encode_json
from tokenledger.core.types import UtcDatetime
from tokenledger.infra.protocols import InvocationContext


@final
class StateAccessor:
    """Read/write/exists primitives for one invocation."""

    __slots__ = ("_ctx",)

    def __init__(self, ctx: InvocationContext) -> None:
        self._ctx = ctx

    @property
    def now(self) -> UtcDatetime:
        return self._ctx.timestamp

    # --- keys ---

    def balance_key(self, address: str) -> Ok[str] | Err[TokenError]:
        return self._ctx.store.create_key(BALANCE_KIND, [address])

    def history_key(self, address: str) -> Ok[str] | Err[TokenError]:
        return self._ctx.store.create_key(TRANSACTION_DATA_KIND, [address])

    # --- raw ---

    def read(self, key: str) -> Ok[bytes | None] | Err[TokenError]:
        """Absent and empty values both read as None."""
        match self._ctx.store.get(key):
            case Err(e):
                return Err(e)
            case Ok(raw):
                pass
        return Ok(raw if raw else None)

    def exists(self, key: str) -> Ok[bool] | Err[TokenError]:
        return self.read(key).map(lambda raw: raw is not None)

    # --- typed ---

    def read_int(self, key: str) -> Ok[int | None] | Err[TokenError]:
        match self.read(key):
            case Err(e):
                return Err(e)
            case Ok(raw):
                pass
        if raw is None:
            return Ok(None)
        return decode_int(raw, key, self.now)

    def write_int(self, key: str, value: int) -> Ok[None] | Err[TokenError]:
        return self._ctx.store.put(key, encode_int(value))

    def read_text(self, key: str) -> Ok[str | None] | Err[TokenError]:
        return self.read(key).map(
            lambda raw: raw.decode("utf-8", errors="replace") if raw is not None else None,
        )

    def write_text(self, key: str, value: str) -> Ok[None] | Err[TokenError]:
        return self._ctx.store.put(key, value.encode("utf-8"))

    def read_json(self, key: str) -> Ok[Any] | Err[TokenError]:
        """Decoded JSON, or None when the key is absent."""
        match self.read(key):
            case Err(e):
                return Err(e)
            case Ok(raw):
                pass
        if raw is None:
            return Ok(None)
        return decode_json(raw, key, self.now)

    def write_json(self, key: str, value: object) -> Ok[None] | Err[TokenError]:
        """Canonical JSON write. PERSISTENCE_ERROR for unencodable values."""
        match encode_json(value, key, self.now):
            case Err(e):
                return Err(e)
            case Ok(payload):
                pass
        return self._ctx.store.put(key, payload)
