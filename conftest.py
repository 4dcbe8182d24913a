# -*- coding: utf-8 -*-
"""
Shared pytest fixtures for the MEXD token ledger.

Goals:
- **Deterministic accounts**: stable 20-byte addresses derived from a tag via
  SHA3-256, so failures are reproducible and readable (`addr("alice")`).
- **Fresh state per test**: every fixture builds a new Ledger / Token; nothing
  is shared between tests.
- **Quiet, isolated logging**: the `mexd` logger is reset after each test so a
  handler installed by the CLI never leaks into the next one.

Usage (inside a test file):
    def test_transfer(token, creator, recipient):
        token.transfer(creator, recipient, 200_000)
        assert token.balance_of(recipient) == 200_000
"""
from __future__ import annotations

import logging
import os
from typing import Callable

import pytest

from mexd.address import derive_address
from mexd.config import DEFAULT_TOTAL_SUPPLY, LedgerConfig, load_config
from mexd.contract import Token
from mexd.token.ledger import Ledger

# Keep dict/set hash-iteration stable and time in UTC.
os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

# Default MEX DIGITAL deployment: 1e9 tokens with 18 decimals.
TOTAL_SUPPLY = DEFAULT_TOTAL_SUPPLY


def _det_address(tag: str) -> bytes:
    return derive_address(f"mexd-tests|{tag}")


@pytest.fixture
def addr() -> Callable[[str], bytes]:
    """Factory for stable test addresses: addr("alice") -> 20 bytes."""
    return _det_address


@pytest.fixture
def creator() -> bytes:
    return _det_address("creator")


@pytest.fixture
def recipient() -> bytes:
    return _det_address("recipient")


@pytest.fixture
def spender() -> bytes:
    return _det_address("spender")


@pytest.fixture
def outsider() -> bytes:
    return _det_address("outsider")


@pytest.fixture
def cfg() -> LedgerConfig:
    """Default config, independent of the developer's MEXD_* environment."""
    return load_config(env={})


@pytest.fixture
def ledger(creator: bytes) -> Ledger:
    return Ledger(creator, TOTAL_SUPPLY)


@pytest.fixture
def token(creator: bytes, cfg: LedgerConfig) -> Token:
    return Token.deploy(creator, config=cfg)


@pytest.fixture(autouse=True)
def _reset_mexd_logging():
    yield
    root = logging.getLogger("mexd")
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(logging.NOTSET)
