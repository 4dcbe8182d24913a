# -*- coding: utf-8 -*-
"""
mexd.math.safe_uint
===================

Checked unsigned-integer helpers for the ledger.

Goals
-----
- Never wrap silently: overflow and underflow raise `ArithmeticOverflow`.
- Domain checks on inputs (`require_amount`) raise `InvalidAmount`.
- The upper bound is explicit. `bound=U256_MAX` models the 256-bit machine;
  `bound=None` keeps Python's unbounded ints (non-strict mode) while still
  refusing to go below zero.

Callers that have a more specific failure kind (insufficient balance, allowance
below zero) check before subtracting; `u256_sub` raising is the last line for
anything that slips through.
"""

from __future__ import annotations

from typing import Any, Optional

from ..errors import ArithmeticOverflow, InvalidAmount
from . import U256_MAX


def require_amount(n: Any, *, bound: Optional[int] = U256_MAX) -> int:
    """
    Ensure `n` is an integer amount in [0, bound] (bool is rejected).
    Returns the amount as a plain int.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidAmount(data={"type": type(n).__name__})
    if n < 0:
        raise InvalidAmount(data={"amount": int(n)})
    if bound is not None and n > bound:
        raise InvalidAmount(data={"amount": int(n), "max": bound})
    return int(n)


def u256_add(x: int, y: int, *, bound: Optional[int] = U256_MAX) -> int:
    """Checked add: raise ArithmeticOverflow if the sum exceeds `bound`."""
    s = x + y
    if bound is not None and s > bound:
        raise ArithmeticOverflow(data={"op": "add", "x": x, "y": y})
    return s


def u256_sub(x: int, y: int) -> int:
    """Checked sub: raise ArithmeticOverflow on underflow (y > x)."""
    if y > x:
        raise ArithmeticOverflow(data={"op": "sub", "x": x, "y": y})
    return x - y


def try_add_u256(x: int, y: int, *, bound: Optional[int] = U256_MAX) -> Optional[int]:
    """Return x+y or None on overflow."""
    s = x + y
    return s if bound is None or s <= bound else None


def try_sub_u256(x: int, y: int) -> Optional[int]:
    """Return x-y or None on underflow."""
    return x - y if x >= y else None


__all__ = [
    "require_amount",
    "u256_add",
    "u256_sub",
    "try_add_u256",
    "try_sub_u256",
]
