"""Tests for tokenledger.infra.memory_adapter: the in-memory host ledger."""

from __future__ import annotations

from harness import at
from tokenledger.core.errors import AccountError, ErrorCode, PersistenceError, TokenError
from tokenledger.core.result import Err, Ok
from tokenledger.infra.memory_adapter import InMemoryInvocation, InMemoryLedger
from tokenledger.infra.protocols import (
    ClientIdentity,
    EventSink,
    InvocationContext,
    LedgerHost,
    StateStore,
)


def _write(key: str, value: bytes):  # noqa: ANN202
    def fn(ctx: InMemoryInvocation) -> Ok[None] | Err[TokenError]:
        return ctx.store.put(key, value)
    return fn


def _fail(ctx: InMemoryInvocation) -> Ok[None] | Err[TokenError]:
    ctx.store.put("k", b"written")
    ctx.events.emit("Transfer", b"{}")
    return Err(AccountError(
        message="nope", code="ACCOUNT_NOT_FOUND", timestamp=ctx.timestamp,
        source="test", account="a",
    ))


class TestProtocolConformance:
    def test_invocation_satisfies_protocols(self) -> None:
        inv = InMemoryLedger().begin("u", "Org1MSP", at())
        assert isinstance(inv, InvocationContext)
        assert isinstance(inv.store, StateStore)
        assert isinstance(inv.events, EventSink)
        assert isinstance(inv.identity, ClientIdentity)

    def test_ledger_is_a_host(self) -> None:
        assert isinstance(InMemoryLedger(), LedgerHost)


class TestCommit:
    def test_invoke_commits_on_ok(self) -> None:
        ledger = InMemoryLedger()
        result = ledger.invoke(_write("k", b"v"), caller_id="u", organization="o", timestamp=at())
        assert result == Ok(None)
        assert ledger.get_raw("k") == b"v"
        assert ledger.count() == 1

    def test_invoke_discards_on_err(self) -> None:
        ledger = InMemoryLedger()
        result = ledger.invoke(_fail, caller_id="u", organization="o", timestamp=at())
        assert isinstance(result, Err)
        assert ledger.get_raw("k") is None
        assert ledger.events() == ()
        assert ledger.count() == 0

    def test_writes_invisible_until_commit(self) -> None:
        ledger = InMemoryLedger()
        inv = ledger.begin("u", "o", at())
        inv.put("k", b"v")
        assert inv.get("k") == Ok(None)
        assert ledger.get_raw("k") is None
        assert inv.pending_writes() == {"k": b"v"}
        assert inv.commit() == Ok(None)
        assert ledger.get_raw("k") == b"v"

    def test_events_delivered_after_commit(self) -> None:
        ledger = InMemoryLedger()
        inv = ledger.begin("minter", "o", at(5))
        inv.emit("Transfer", b'{"value":1}')
        assert ledger.events() == ()
        inv.commit()
        (event,) = ledger.events("Transfer")
        assert event.payload == b'{"value":1}'
        assert event.caller_id == "minter"
        assert event.timestamp == at(5)

    def test_empty_value_rejected(self) -> None:
        inv = InMemoryLedger().begin("u", "o", at())
        result = inv.put("k", b"")
        assert isinstance(result, Err)
        assert isinstance(result.error, PersistenceError)

    def test_closed_invocation_rejects_io(self) -> None:
        inv = InMemoryLedger().begin("u", "o", at())
        inv.commit()
        assert isinstance(inv.get("k"), Err)
        assert isinstance(inv.put("k", b"v"), Err)
        assert isinstance(inv.emit("e", b"x"), Err)
        assert isinstance(inv.commit(), Err)


class TestConflicts:
    def test_stale_read_rejected(self) -> None:
        ledger = InMemoryLedger()
        ledger.invoke(_write("k", b"1"), caller_id="u", organization="o", timestamp=at())
        first = ledger.begin("u", "o", at(1))
        second = ledger.begin("u", "o", at(1))
        first.get("k")
        second.get("k")
        first.put("k", b"2")
        second.put("k", b"3")
        assert first.commit() == Ok(None)
        result = second.commit()
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.PERSISTENCE_ERROR.value
        assert result.error.operation == "commit"
        assert "MVCC" in result.error.message
        assert ledger.get_raw("k") == b"2"

    def test_read_of_absent_key_conflicts_with_its_creation(self) -> None:
        ledger = InMemoryLedger()
        reader = ledger.begin("u", "o", at())
        reader.get("k")
        ledger.invoke(_write("k", b"1"), caller_id="u", organization="o", timestamp=at())
        reader.put("other", b"x")
        assert isinstance(reader.commit(), Err)

    def test_blind_writes_do_not_conflict(self) -> None:
        ledger = InMemoryLedger()
        first = ledger.begin("u", "o", at())
        second = ledger.begin("u", "o", at())
        first.put("k", b"1")
        second.put("k", b"2")
        assert first.commit() == Ok(None)
        assert second.commit() == Ok(None)
        assert ledger.get_raw("k") == b"2"

    def test_create_key_delegates(self) -> None:
        inv = InMemoryLedger().begin("u", "o", at())
        assert inv.create_key("balance", ["a"]) == Ok("\x00balance\x00a\x00")
        assert isinstance(inv.create_key("balance", ["a\x00"]), Err)
