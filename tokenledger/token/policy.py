"""Authorization policy for privileged operations.

Privileged operations ask a policy for a capability instead of comparing
organization strings inline, so deployments can swap the rule.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, final, runtime_checkable

from tokenledger.core.errors import ErrorCode, UnauthorizedError
from tokenledger.core.result import Err, Ok
from tokenledger.core.types import UtcDatetime
from tokenledger.infra.protocols import ClientIdentity


class Capability(Enum):
    """Privileged actions. Exhaustive."""

    INITIALIZE = "initialize"
    MINT = "mint"
    BURN = "burn"


@runtime_checkable
class AuthorizationPolicy(Protocol):
    def is_authorized(self, identity: ClientIdentity, capability: Capability) -> bool: ...


@final
@dataclass(frozen=True, slots=True)
class OrganizationPolicy:
    """Grants every capability to members of one administrator organization."""

    admin_organization: str

    def is_authorized(self, identity: ClientIdentity, capability: Capability) -> bool:  # noqa: ARG002
        return identity.get_organization() == self.admin_organization


@final
@dataclass(frozen=True, slots=True)
class CapabilityPolicy:
    """Per-capability organization allow-lists. Missing capability: denied."""

    grants: tuple[tuple[Capability, frozenset[str]], ...]

    @staticmethod
    def create(grants: dict[Capability, Collection[str]]) -> CapabilityPolicy:
        return CapabilityPolicy(grants=tuple(
            (cap, frozenset(orgs)) for cap, orgs in sorted(grants.items(), key=lambda kv: kv[0].value)
        ))

    def is_authorized(self, identity: ClientIdentity, capability: Capability) -> bool:
        for cap, orgs in self.grants:
            if cap is capability:
                return identity.get_organization() in orgs
        return False


def require(
    policy: AuthorizationPolicy,
    identity: ClientIdentity,
    capability: Capability,
    at: UtcDatetime,
    source: str,
) -> Ok[None] | Err[UnauthorizedError]:
    """Ok(None) if granted, else UNAUTHORIZED naming the caller and organization."""
    if policy.is_authorized(identity, capability):
        return Ok(None)
    caller = identity.get_id()
    organization = identity.get_organization()
    return Err(UnauthorizedError(
        message=f"client {caller} of organization {organization} is not authorized "
        f"to {capability.value}",
        code=ErrorCode.UNAUTHORIZED.value,
        timestamp=at,
        source=source,
        caller=caller,
        organization=organization,
        capability=capability.value,
    ))
