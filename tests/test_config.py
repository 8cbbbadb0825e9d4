"""Tests for tokenledger.infra.config."""

from __future__ import annotations

import dataclasses

import pytest

from tokenledger.core.arithmetic import MAX_SAFE_INTEGER
from tokenledger.core.result import Err, Ok
from tokenledger.infra.config import TASK_QUEUE, TokenConfig, WorkerConfig


class TestTokenConfig:
    def test_defaults(self) -> None:
        cfg = TokenConfig()
        assert cfg.admin_organization == "Org1MSP"
        assert cfg.null_address == "0x0"
        assert cfg.admin_sentinel == "admin"
        assert cfg.transfer_event == "Transfer"
        assert cfg.max_amount == MAX_SAFE_INTEGER
        assert cfg.strict_burn is True

    def test_create_default_equals_constructor(self) -> None:
        assert TokenConfig.create() == Ok(TokenConfig())

    def test_create_overrides(self) -> None:
        result = TokenConfig.create(admin_organization="BankMSP", strict_burn=False)
        assert isinstance(result, Ok)
        assert result.value.admin_organization == "BankMSP"
        assert result.value.strict_burn is False

    @pytest.mark.parametrize("field", ["admin_organization", "null_address", "admin_sentinel", "transfer_event"])
    def test_create_rejects_blank(self, field: str) -> None:
        result = TokenConfig.create(**{field: "  "})
        assert isinstance(result, Err)
        assert field in result.error

    @pytest.mark.parametrize("max_amount", [0, -1, True])
    def test_create_rejects_bad_bound(self, max_amount: int) -> None:
        assert isinstance(TokenConfig.create(max_amount=max_amount), Err)

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            TokenConfig().strict_burn = False  # type: ignore[misc]


class TestWorkerConfig:
    def test_defaults(self) -> None:
        cfg = WorkerConfig()
        assert cfg.target_host == "localhost:7233"
        assert cfg.namespace == "default"
        assert cfg.task_queue == TASK_QUEUE == "token-ledger"
