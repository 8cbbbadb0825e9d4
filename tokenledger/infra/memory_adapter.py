"""In-memory host ledger implementing the protocols in protocols.py.

Test double that lets the suite run end to end without a ledger network.
Semantics follow an execute-then-commit ledger:

  - reads see the committed snapshot, never the invocation's own pending
    writes;
  - every read records the committed version of the key;
  - commit() applies all writes and events at once, or rejects the whole
    invocation when a key it read was committed by someone else since
    (MVCC read conflict).

All classes are @final. None of them are production code.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import final

from tokenledger.core.errors import ErrorCode, PersistenceError, TokenError, ValidationError
from tokenledger.core.keys import create_composite_key
from tokenledger.core.result import Err, Ok
from tokenledger.core.types import UtcDatetime


def _persistence_error(operation: str, detail: str, at: UtcDatetime) -> PersistenceError:
    """Helper to construct PersistenceError with consistent formatting."""
    return PersistenceError(
        message=detail,
        code=ErrorCode.PERSISTENCE_ERROR.value,
        timestamp=at,
        source=f"memory_adapter.{operation}",
        operation=operation,
    )


@final
@dataclass(frozen=True, slots=True)
class StaticIdentity:
    """Fixed caller identity."""

    caller_id: str
    organization: str

    def get_id(self) -> str:
        return self.caller_id

    def get_organization(self) -> str:
        return self.organization


@final
@dataclass(frozen=True, slots=True)
class CommittedEvent:
    """An event delivered after its invocation committed."""

    name: str
    payload: bytes
    caller_id: str
    timestamp: UtcDatetime


@final
class InMemoryInvocation:
    """One invocation's view of the ledger: snapshot reads, buffered writes."""

    def __init__(
        self,
        ledger: InMemoryLedger,
        identity: StaticIdentity,
        timestamp: UtcDatetime,
    ) -> None:
        self._ledger = ledger
        self._identity = identity
        self._timestamp = timestamp
        self._snapshot: dict[str, bytes] = dict(ledger._state)
        self._snapshot_versions: dict[str, int] = dict(ledger._versions)
        self._read_versions: dict[str, int] = {}
        self._writes: dict[str, bytes] = {}
        self._events: list[tuple[str, bytes]] = []
        self._closed = False

    # --- InvocationContext ---

    @property
    def store(self) -> InMemoryInvocation:
        return self

    @property
    def identity(self) -> StaticIdentity:
        return self._identity

    @property
    def events(self) -> InMemoryInvocation:
        return self

    @property
    def timestamp(self) -> UtcDatetime:
        return self._timestamp

    # --- StateStore ---

    def get(self, key: str) -> Ok[bytes | None] | Err[PersistenceError]:
        if self._closed:
            return Err(_persistence_error("get", "Invocation already closed", self._timestamp))
        self._read_versions.setdefault(key, self._snapshot_versions.get(key, 0))
        return Ok(self._snapshot.get(key))

    def put(self, key: str, value: bytes) -> Ok[None] | Err[PersistenceError]:
        if self._closed:
            return Err(_persistence_error("put", "Invocation already closed", self._timestamp))
        if not value:
            return Err(_persistence_error("put", f"Empty value for key {key!r}", self._timestamp))
        self._writes[key] = value
        return Ok(None)

    def create_key(
        self, kind: str, params: Sequence[str],
    ) -> Ok[str] | Err[ValidationError]:
        return create_composite_key(kind, params, self._timestamp)

    # --- EventSink ---

    def emit(self, name: str, payload: bytes) -> Ok[None] | Err[PersistenceError]:
        if self._closed:
            return Err(_persistence_error("emit", "Invocation already closed", self._timestamp))
        self._events.append((name, payload))
        return Ok(None)

    # --- Lifecycle ---

    def pending_writes(self) -> dict[str, bytes]:
        """Test-only helper."""
        return dict(self._writes)

    def commit(self) -> Ok[None] | Err[PersistenceError]:
        """Apply writes and events, or reject on a stale read."""
        if self._closed:
            return Err(_persistence_error("commit", "Invocation already closed", self._timestamp))
        self._closed = True
        return self._ledger._apply(self)

    def discard(self) -> None:
        self._closed = True


@final
class InMemoryLedger:
    """Committed world state, key versions and the delivered event log."""

    def __init__(self) -> None:
        self._state: dict[str, bytes] = {}
        self._versions: dict[str, int] = {}
        self._events: list[CommittedEvent] = []
        self._commits = 0

    def begin(
        self,
        caller_id: str,
        organization: str,
        timestamp: UtcDatetime | None = None,
    ) -> InMemoryInvocation:
        """Open an invocation against the current committed snapshot."""
        return InMemoryInvocation(
            self,
            StaticIdentity(caller_id=caller_id, organization=organization),
            timestamp if timestamp is not None else UtcDatetime.now(),
        )

    def invoke[T](
        self,
        fn: Callable[[InMemoryInvocation], Ok[T] | Err[TokenError]],
        *,
        caller_id: str,
        organization: str,
        timestamp: UtcDatetime | None = None,
    ) -> Ok[T] | Err[TokenError]:
        """Run fn as one invocation. Commits on Ok, discards everything on Err."""
        inv = self.begin(caller_id, organization, timestamp)
        result = fn(inv)
        if isinstance(result, Err):
            inv.discard()
            return result
        committed = inv.commit()
        if isinstance(committed, Err):
            return committed
        return result

    def _apply(self, inv: InMemoryInvocation) -> Ok[None] | Err[PersistenceError]:
        for key, version in inv._read_versions.items():
            if self._versions.get(key, 0) != version:
                return Err(_persistence_error(
                    "commit",
                    f"MVCC read conflict on key {key!r}: read version {version}, "
                    f"committed version {self._versions.get(key, 0)}",
                    inv.timestamp,
                ))
        for key, value in inv._writes.items():
            self._state[key] = value
            self._versions[key] = self._versions.get(key, 0) + 1
        for name, payload in inv._events:
            self._events.append(CommittedEvent(
                name=name,
                payload=payload,
                caller_id=inv.identity.get_id(),
                timestamp=inv.timestamp,
            ))
        self._commits += 1
        return Ok(None)

    def get_raw(self, key: str) -> bytes | None:
        """Test-only helper."""
        return self._state.get(key)

    def keys(self) -> tuple[str, ...]:
        """Test-only helper."""
        return tuple(self._state.keys())

    def events(self, name: str | None = None) -> tuple[CommittedEvent, ...]:
        """Test-only helper."""
        return tuple(e for e in self._events if name is None or e.name == name)

    def count(self) -> int:
        """Number of committed invocations. Test-only helper."""
        return self._commits

    def snapshot(self) -> dict[str, bytes]:
        """Copy of the committed state. Test-only helper."""
        return dict(self._state)
