"""TokenContract: the public operation surface.

Holds only immutable configuration and the authorization policy. Every
method takes the invocation context and returns Ok(value) | Err(TokenError);
the host commits the invocation's writes only on Ok.

dispatch() routes a named invocation ("Mint", "TransferFrom", ...) with
string arguments to the matching method.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, final

from tokenledger.core.errors import ErrorCode, FieldViolation, TokenError, ValidationError
from tokenledger.core.result import Err, Ok
from tokenledger.infra.config import TokenConfig
from tokenledger.infra.protocols import InvocationContext
from tokenledger.token import accounts, history, metadata, supply, transfer
from tokenledger.token.history import TransactionRecord
from tokenledger.token.policy import AuthorizationPolicy, OrganizationPolicy


@final
class TokenContract:
    """Fungible token contract. Stateless between invocations."""

    __slots__ = ("_config", "_policy")

    def __init__(
        self,
        config: TokenConfig | None = None,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._config = config if config is not None else TokenConfig()
        self._policy = (
            policy if policy is not None
            else OrganizationPolicy(admin_organization=self._config.admin_organization)
        )

    @property
    def config(self) -> TokenConfig:
        return self._config

    # --- Metadata ---

    def initialize(
        self, ctx: InvocationContext, name: str, symbol: str, decimals: str | int,
    ) -> Ok[bool] | Err[TokenError]:
        return metadata.initialize(ctx, self._policy, name, symbol, decimals)

    def token_name(self, ctx: InvocationContext) -> Ok[str] | Err[TokenError]:
        return metadata.token_name(ctx)

    def symbol(self, ctx: InvocationContext) -> Ok[str] | Err[TokenError]:
        return metadata.symbol(ctx)

    def decimals(self, ctx: InvocationContext) -> Ok[int] | Err[TokenError]:
        return metadata.decimals(ctx)

    def total_supply(self, ctx: InvocationContext) -> Ok[int] | Err[TokenError]:
        return metadata.total_supply(ctx)

    # --- Accounts ---

    def signup(self, ctx: InvocationContext, address: str) -> Ok[bool] | Err[TokenError]:
        return accounts.signup(ctx, address)

    def balance_of(self, ctx: InvocationContext, owner: str) -> Ok[int] | Err[TokenError]:
        return accounts.balance_of(ctx, owner)

    def client_account_balance(self, ctx: InvocationContext) -> Ok[int] | Err[TokenError]:
        return accounts.client_account_balance(ctx)

    def client_account_id(self, ctx: InvocationContext) -> Ok[str] | Err[TokenError]:
        return accounts.client_account_id(ctx)

    # --- Transfers ---

    def transfer(
        self, ctx: InvocationContext, to: str, value: str | int,
    ) -> Ok[bool] | Err[TokenError]:
        return transfer.transfer(ctx, self._config, to, value)

    def transfer_from(
        self, ctx: InvocationContext, sender: str, recipient: str, value: str | int,
    ) -> Ok[bool] | Err[TokenError]:
        return transfer.transfer_from(ctx, self._config, sender, recipient, value)

    # --- Supply ---

    def mint(self, ctx: InvocationContext, amount: str | int) -> Ok[bool] | Err[TokenError]:
        return supply.mint(ctx, self._config, self._policy, amount)

    def burn(self, ctx: InvocationContext, amount: str | int) -> Ok[bool] | Err[TokenError]:
        return supply.burn(ctx, self._config, self._policy, amount)

    # --- History ---

    def get_transaction_data(
        self, ctx: InvocationContext, address: str,
    ) -> Ok[tuple[TransactionRecord, ...]] | Err[TokenError]:
        return history.get_transaction_data(ctx, address)

    # --- Dispatch ---

    def operations(self) -> dict[str, Callable[..., Ok[Any] | Err[TokenError]]]:
        """Invocation name -> bound method."""
        return {
            "Initialize": self.initialize,
            "Mint": self.mint,
            "Burn": self.burn,
            "Transfer": self.transfer,
            "TransferFrom": self.transfer_from,
            "signup": self.signup,
            "BalanceOf": self.balance_of,
            "ClientAccountBalance": self.client_account_balance,
            "ClientAccountID": self.client_account_id,
            "TokenName": self.token_name,
            "Symbol": self.symbol,
            "Decimals": self.decimals,
            "TotalSupply": self.total_supply,
            "getTransactionData": self.get_transaction_data,
        }

    def dispatch(
        self, ctx: InvocationContext, operation: str, args: Sequence[str],
    ) -> Ok[Any] | Err[TokenError]:
        """Invoke a named operation. UNKNOWN_OPERATION for bad names or arity."""
        handler = self.operations().get(operation)
        if handler is None:
            return Err(_dispatch_error(
                ctx, operation, "operation", "must be a known operation", operation,
            ))
        expected = _ARITY[operation]
        if len(args) != expected:
            return Err(_dispatch_error(
                ctx, operation, "args",
                f"expects {expected} argument(s)", str(len(args)),
            ))
        return handler(ctx, *args)


_ARITY: dict[str, int] = {
    "Initialize": 3,
    "Mint": 1,
    "Burn": 1,
    "Transfer": 2,
    "TransferFrom": 3,
    "signup": 1,
    "BalanceOf": 1,
    "ClientAccountBalance": 0,
    "ClientAccountID": 0,
    "TokenName": 0,
    "Symbol": 0,
    "Decimals": 0,
    "TotalSupply": 0,
    "getTransactionData": 1,
}


def _dispatch_error(
    ctx: InvocationContext, operation: str, path: str, constraint: str, actual: str,
) -> ValidationError:
    return ValidationError(
        message=f"Cannot dispatch {operation!r}: {path} {constraint}",
        code=ErrorCode.UNKNOWN_OPERATION.value,
        timestamp=ctx.timestamp,
        source="token.contract.TokenContract.dispatch",
        fields=(FieldViolation(path=path, constraint=constraint, actual_value=actual),),
    )
