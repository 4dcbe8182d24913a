# -*- coding: utf-8 -*-
"""
mexd.token.metadata
===================

Name / symbol / decimals storage for the token contract.

Metadata is plain attribute storage: the ledger never reads it. Validation only
guards against obviously broken deployments (empty or non-printable strings,
absurd decimals) and raises `ValueError`, the same way configuration loading does.

Symbols/Names:
  - Symbols: 1..11 printable ASCII, typically uppercase (e.g., "MEXD").
  - Names:   1..64 printable ASCII, mixed case allowed.
  - Decimals: 0..36.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Final

MAX_NAME_LEN: Final[int] = 64
MAX_SYMBOL_LEN: Final[int] = 11
MAX_DECIMALS: Final[int] = 36


def is_printable_ascii(s: str) -> bool:
    """
    True iff `s` is non-empty and every character is printable ASCII (32..126).
    """
    if not isinstance(s, str) or len(s) == 0:
        return False
    return all(32 <= ord(c) <= 126 for c in s)


def require_name(name: str) -> None:
    if not is_printable_ascii(name) or len(name) > MAX_NAME_LEN:
        raise ValueError(f"name must be 1..{MAX_NAME_LEN} printable ASCII characters")


def require_symbol(sym: str) -> None:
    if not is_printable_ascii(sym) or len(sym) > MAX_SYMBOL_LEN:
        raise ValueError(f"symbol must be 1..{MAX_SYMBOL_LEN} printable ASCII characters")


def require_decimals(n: Any) -> None:
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError("decimals must be an integer")
    if not (0 <= n <= MAX_DECIMALS):
        raise ValueError(f"decimals must be in [0, {MAX_DECIMALS}]")


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    decimals: int

    def __post_init__(self) -> None:
        require_name(self.name)
        require_symbol(self.symbol)
        require_decimals(self.decimals)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "symbol": self.symbol, "decimals": self.decimals}


__all__ = [
    "MAX_NAME_LEN",
    "MAX_SYMBOL_LEN",
    "MAX_DECIMALS",
    "is_printable_ascii",
    "require_name",
    "require_symbol",
    "require_decimals",
    "TokenMetadata",
]
