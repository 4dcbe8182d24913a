# -*- coding: utf-8 -*-
"""
tests.property package bootstrap.

Shared configuration for property-based tests (Hypothesis).

What this does on import:
- Registers named Hypothesis profiles (dev/ci/fast/stress).
- Selects the active profile using HYPOTHESIS_PROFILE, otherwise "ci" on CI
  (CI env var present/truthy) and "dev" locally.
- Exposes strategies for ledger accounts, amounts and operation sequences.

Usage in tests:
    from tests.property import given, ops_lists

    @given(ops_lists())
    def test_supply_is_conserved(ops):
        ...

Environment knobs:
- HYPOTHESIS_PROFILE=dev|ci|fast|stress
- CI=true (auto-pick the 'ci' profile if HYPOTHESIS_PROFILE not set)
"""
from __future__ import annotations

import os
from typing import Final, Tuple

from hypothesis import HealthCheck, Verbosity, given, settings
from hypothesis import strategies as st

from mexd.address import derive_address
from mexd.math import U256_MAX

# ---- profiles ------------------------------------------------------------------

_SLOW = (HealthCheck.too_slow, HealthCheck.filter_too_much)

_PROFILES = {
    # name: (max_examples, derandomize, verbosity, extra suppressed checks)
    "dev": (100, False, Verbosity.normal, ()),
    "ci": (200, True, Verbosity.verbose, ()),
    "fast": (25, False, Verbosity.normal, ()),
    "stress": (1000, True, Verbosity.normal, (HealthCheck.data_too_large,)),
}

for _name, (_n, _derand, _verb, _extra) in _PROFILES.items():
    settings.register_profile(
        _name,
        max_examples=_n,
        deadline=None,
        derandomize=_derand,
        verbosity=_verb,
        suppress_health_check=_SLOW + _extra,
    )


def _env_truthy(name: str) -> bool:
    v = os.getenv(name)
    return (v or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or (
    "ci" if _env_truthy("CI") else "dev"
)
settings.load_profile(_active)


def active_profile() -> str:
    return _active


# ---- ledger strategies ---------------------------------------------------------

# A small fixed cast keeps collisions (self-transfers, repeated pairs) frequent.
ACCOUNTS: Final[Tuple[bytes, ...]] = tuple(
    derive_address(f"prop|{i}") for i in range(4)
)

SUPPLY: Final[int] = 10_000


def accounts():
    return st.sampled_from(ACCOUNTS)


def amounts(max_value: int = SUPPLY * 2):
    """Mostly small amounts around the supply, with the u256 edges mixed in."""
    return st.one_of(
        st.integers(min_value=0, max_value=max_value),
        st.sampled_from((0, 1, U256_MAX - 1, U256_MAX)),
    )


def ops():
    """One ledger call as (method, args...) with an explicit caller first."""
    return st.one_of(
        st.tuples(st.just("transfer"), accounts(), accounts(), amounts()),
        st.tuples(st.just("approve"), accounts(), accounts(), amounts()),
        st.tuples(st.just("increase_allowance"), accounts(), accounts(), amounts()),
        st.tuples(st.just("decrease_allowance"), accounts(), accounts(), amounts()),
        st.tuples(st.just("transfer_from"), accounts(), accounts(), accounts(), amounts()),
    )


def ops_lists(max_size: int = 40):
    return st.lists(ops(), min_size=0, max_size=max_size)


__all__ = [
    "st",
    "given",
    "active_profile",
    "ACCOUNTS",
    "SUPPLY",
    "accounts",
    "amounts",
    "ops",
    "ops_lists",
]
