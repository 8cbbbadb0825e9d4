"""Host ledger protocol definitions.

The engine depends on these abstractions; hosts implement them. The
in-memory host in memory_adapter.py is the reference implementation used
by the test suite.

Store and event operations return Ok[T] | Err[PersistenceError]. Host
failures are visible values in the type system, never exceptions.

Concurrency contract: an invocation reads every key it depends on before
writing dependent keys, so optimistic conflict detection in the host sees
a precise read set.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from tokenledger.core.errors import PersistenceError, TokenError, ValidationError
from tokenledger.core.result import Err, Ok
from tokenledger.core.types import UtcDatetime


@runtime_checkable
class StateStore(Protocol):
    """Byte-addressable world state as seen by one invocation.

    Invariants:
      - get() returns Ok(None) for an absent key, never Err.
      - put() is buffered by the host and only becomes visible on commit.
      - create_key() is deterministic and rejects the reserved separator.
    """

    def get(self, key: str) -> Ok[bytes | None] | Err[PersistenceError]: ...

    def put(self, key: str, value: bytes) -> Ok[None] | Err[PersistenceError]: ...

    def create_key(
        self, kind: str, params: Sequence[str],
    ) -> Ok[str] | Err[ValidationError]: ...


@runtime_checkable
class ClientIdentity(Protocol):
    """Verified identity of the submitting client."""

    def get_id(self) -> str: ...

    def get_organization(self) -> str: ...


@runtime_checkable
class EventSink(Protocol):
    """Named notification events, delivered by the host after commit."""

    def emit(self, name: str, payload: bytes) -> Ok[None] | Err[PersistenceError]: ...


@runtime_checkable
class InvocationContext(Protocol):
    """Everything one invocation may touch."""

    @property
    def store(self) -> StateStore: ...

    @property
    def identity(self) -> ClientIdentity: ...

    @property
    def events(self) -> EventSink: ...

    @property
    def timestamp(self) -> UtcDatetime: ...


@runtime_checkable
class LedgerHost(Protocol):
    """Runs one invocation and commits its writes only if it returns Ok."""

    def invoke[T](
        self,
        fn: Callable[[InvocationContext], Ok[T] | Err[TokenError]],
        *,
        caller_id: str,
        organization: str,
        timestamp: UtcDatetime | None = None,
    ) -> Ok[T] | Err[TokenError]: ...
