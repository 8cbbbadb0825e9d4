"""Hypothesis profiles, strategies and pytest fixtures for tokenledger."""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings
from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from harness import ADMIN_ID, ALICE, BOB, CAROL, Harness
from tokenledger.core.arithmetic import MAX_SAFE_INTEGER

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# STRATEGIES
# ===================================================================

ACCOUNTS = (ADMIN_ID, ALICE, BOB, CAROL)


def domain_ints(bound: int = MAX_SAFE_INTEGER) -> SearchStrategy[int]:
    """Integers inside the ledger's arithmetic domain."""
    return st.integers(min_value=-bound, max_value=bound)


def token_amounts(max_value: int = 1_000) -> SearchStrategy[int]:
    """Small non-negative amounts, so sequences stay interesting."""
    return st.integers(min_value=0, max_value=max_value)


def addresses() -> SearchStrategy[str]:
    """Identity strings free of the reserved key separator."""
    return st.text(
        alphabet=st.characters(exclude_characters="\x00", exclude_categories=("Cs",)),
        min_size=1,
        max_size=40,
    ).filter(lambda s: "\U0010ffff" not in s)


# ===================================================================
# FIXTURES
# ===================================================================


@pytest.fixture
def harness() -> Harness:
    """Fresh, uninitialized ledger."""
    return Harness()


@pytest.fixture
def token() -> Harness:
    """Initialized ledger: admin holds 1000, alice and bob signed up with 0."""
    h = Harness().initialized()
    h.ok("Mint", "1000")
    h.ok("signup", ALICE)
    h.ok("signup", BOB)
    return h
