"""Tests for tokenledger.token.supply: Mint and Burn."""

from __future__ import annotations

import json

import pytest

from harness import ADMIN_ID, ALICE, OTHER_ORG, Harness
from tokenledger.core.errors import (
    AccountError,
    ArithmeticFaultError,
    ErrorCode,
    InsufficientFundsError,
    InvalidAmountError,
    MissingStateError,
    UnauthorizedError,
)
from tokenledger.infra.config import TokenConfig


def _payloads(h: Harness) -> list[dict[str, object]]:
    return [json.loads(e.payload) for e in h.ledger.events("Transfer")]


class TestMint:
    def test_accumulates(self, harness: Harness) -> None:
        harness.initialized()
        harness.ok("Mint", "100")
        harness.ok("Mint", "50")
        assert harness.balance(ADMIN_ID) == 150
        assert harness.supply() == 150
        assert _payloads(harness) == [
            {"from": "0x0", "to": ADMIN_ID, "value": 100},
            {"from": "0x0", "to": ADMIN_ID, "value": 50},
        ]

    def test_event_carries_invocation_metadata(self, harness: Harness) -> None:
        harness.initialized()
        harness.ok("Mint", "7")
        (event,) = harness.ledger.events("Transfer")
        assert event.caller_id == ADMIN_ID

    def test_implicit_signup(self, harness: Harness) -> None:
        harness.initialized()
        assert harness.balance(ADMIN_ID) is None
        harness.ok("Mint", "1")
        assert harness.ok("BalanceOf", ADMIN_ID) == 1

    @pytest.mark.parametrize("amount", ["0", "-5", "ten", "9007199254740992", "9" * 5000])
    def test_invalid_amount(self, harness: Harness, amount: str) -> None:
        harness.initialized()
        err = harness.err("Mint", amount)
        assert isinstance(err, InvalidAmountError)
        assert harness.supply() is None
        assert harness.ledger.events() == ()

    def test_unauthorized(self, harness: Harness) -> None:
        harness.initialized()
        err = harness.err("Mint", "10", caller=ALICE, org=OTHER_ORG)
        assert isinstance(err, UnauthorizedError)
        assert err.capability == "mint"
        assert harness.supply() is None

    def test_supply_overflow(self) -> None:
        h = Harness(config=TokenConfig(max_amount=100)).initialized()
        h.ok("Mint", "90")
        err = h.err("Mint", "11")
        assert isinstance(err, ArithmeticFaultError)
        assert err.code == ErrorCode.ARITHMETIC_OVERFLOW.value
        assert h.supply() == 90
        assert len(h.ledger.events("Transfer")) == 1


class TestBurnStrict:
    def test_burns(self, token: Harness) -> None:
        assert token.ok("Burn", "400") is True
        assert token.balance(ADMIN_ID) == 600
        assert token.supply() == 600
        assert _payloads(token)[-1] == {"from": ADMIN_ID, "to": "0x0", "value": 400}

    def test_entire_balance(self, token: Harness) -> None:
        token.ok("Burn", "1000")
        assert token.supply() == 0

    @pytest.mark.parametrize("amount", ["0", "-1"])
    def test_non_positive_rejected(self, token: Harness, amount: str) -> None:
        err = token.err("Burn", amount)
        assert err.code == ErrorCode.INVALID_AMOUNT.value
        assert token.supply() == 1000

    def test_more_than_balance_rejected(self, token: Harness) -> None:
        token.ok("Transfer", ALICE, "600")
        err = token.err("Burn", "500")
        assert isinstance(err, InsufficientFundsError)
        assert err.balance == 400
        assert token.supply() == 1000

    def test_unauthorized(self, token: Harness) -> None:
        err = token.err("Burn", "1", caller=ALICE, org=OTHER_ORG)
        assert err.code == ErrorCode.UNAUTHORIZED.value

    def test_minter_without_account(self, token: Harness) -> None:
        err = token.err("Burn", "1", caller="minter2")
        assert isinstance(err, AccountError)
        assert err.code == ErrorCode.ACCOUNT_NOT_FOUND.value

    def test_supply_missing(self, harness: Harness) -> None:
        harness.initialized()
        harness.ok("signup", ADMIN_ID)
        err = harness.err("Burn", "1")
        assert isinstance(err, MissingStateError)
        assert err.code == ErrorCode.SUPPLY_NOT_FOUND.value


class TestBurnPermissive:
    @pytest.fixture
    def loose(self) -> Harness:
        h = Harness(config=TokenConfig(strict_burn=False)).initialized()
        h.ok("Mint", "100")
        return h

    def test_overdraw_goes_negative(self, loose: Harness) -> None:
        loose.ok("Burn", "150")
        assert loose.balance(ADMIN_ID) == -50
        assert loose.supply() == -50

    def test_negative_burn_credits(self, loose: Harness) -> None:
        loose.ok("Burn", "-20")
        assert loose.balance(ADMIN_ID) == 120
        assert loose.supply() == 120

    def test_zero_burn_emits(self, loose: Harness) -> None:
        loose.ok("Burn", "0")
        assert _payloads(loose)[-1]["value"] == 0

    def test_still_bounded(self) -> None:
        h = Harness(config=TokenConfig(max_amount=100, strict_burn=False)).initialized()
        h.ok("Mint", "1")
        h.ok("Burn", "100")
        err = h.err("Burn", "2")
        assert err.code == ErrorCode.ARITHMETIC_UNDERFLOW.value
