"""Tests for tokenledger.token.accounts: signup and balance queries."""

from __future__ import annotations

from hypothesis import given

from conftest import addresses
from harness import ADMIN_ID, ALICE, BOB, CAROL, OTHER_ORG, Harness, at, balance_key
from tokenledger.core.errors import AccountError, ErrorCode, ValidationError
from tokenledger.core.result import Err, Ok
from tokenledger.token import accounts
from tokenledger.token.state import StateAccessor


class TestSignup:
    def test_creates_zero_balance(self, token: Harness) -> None:
        assert token.ok("signup", CAROL) is True
        assert token.balance(CAROL) == 0
        assert token.ok("BalanceOf", CAROL) == 0

    def test_any_org_may_sign_up(self, token: Harness) -> None:
        assert token.ok("signup", CAROL, caller=CAROL, org=OTHER_ORG) is True

    def test_repeat_signup_keeps_balance(self, token: Harness) -> None:
        token.ok("Transfer", ALICE, "40")
        token.ok("signup", ALICE)
        assert token.balance(ALICE) == 40

    def test_repeat_signup_still_writes(self, token: Harness) -> None:
        """A stale reader of the key conflicts with a repeated signup."""
        reader = token.ledger.begin(BOB, OTHER_ORG, at(100))
        assert isinstance(
            token.contract.balance_of(reader, ALICE), Ok,
        )
        token.ok("signup", ALICE)
        reader.put("unrelated", b"x")
        assert isinstance(reader.commit(), Err)

    def test_reserved_character_rejected(self, token: Harness) -> None:
        err = token.err("signup", "bad\x00address")
        assert isinstance(err, ValidationError)
        assert err.code == ErrorCode.INVALID_KEY.value

    @given(address=addresses())
    def test_any_valid_address(self, address: str) -> None:
        h = Harness().initialized()
        h.ok("signup", address)
        assert h.ledger.get_raw(balance_key(address)) == b"0"


class TestBalanceQueries:
    def test_balance_of_unknown(self, token: Harness) -> None:
        err = token.err("BalanceOf", CAROL)
        assert isinstance(err, AccountError)
        assert err.code == ErrorCode.ACCOUNT_NOT_FOUND.value
        assert err.account == CAROL
        assert err.message == f"the account {CAROL} does not exist"

    def test_client_account_balance(self, token: Harness) -> None:
        assert token.ok("ClientAccountBalance") == 1000
        assert token.ok("ClientAccountBalance", caller=ALICE, org=OTHER_ORG) == 0

    def test_client_account_balance_unknown(self, token: Harness) -> None:
        err = token.err("ClientAccountBalance", caller=CAROL, org=OTHER_ORG)
        assert err.code == ErrorCode.ACCOUNT_NOT_FOUND.value

    def test_client_account_id(self, token: Harness) -> None:
        assert token.ok("ClientAccountID") == ADMIN_ID
        assert token.ok("ClientAccountID", caller=CAROL, org=OTHER_ORG) == CAROL

    def test_queries_do_not_write(self, token: Harness) -> None:
        before = token.ledger.snapshot()
        token.ok("BalanceOf", ALICE)
        token.ok("ClientAccountID")
        assert token.ledger.snapshot() == before


class TestAccountMissingMessages:
    def test_messages_per_code(self, token: Harness) -> None:
        state = StateAccessor(token.ledger.begin(ADMIN_ID, "Org1MSP", at()))
        assert accounts.account_missing(
            state, "a", ErrorCode.SOURCE_ACCOUNT_NOT_FOUND, "Transfer",
        ).message == "client account a no balance"
        assert accounts.account_missing(
            state, "a", ErrorCode.DESTINATION_NOT_SIGNED_UP, "Transfer",
        ).message == "client account a no signup"


class TestStateAccessor:
    def test_unencodable_json_is_an_error_value(self, token: Harness) -> None:
        inv = token.ledger.begin(ADMIN_ID, "Org1MSP", at(100))
        result = StateAccessor(inv).write_json("k", {"v": object()})
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.PERSISTENCE_ERROR.value
        assert inv.pending_writes() == {}
