# -*- coding: utf-8 -*-
"""
mexd.math
=========

Integer-only numeric envelopes shared by the ledger.

Amounts are Python ints (unbounded), but the token is semantically a 256-bit
unsigned machine: every stored balance/allowance and every amount argument lives
in [0, U256_MAX]. Checked arithmetic lives in `mexd.math.safe_uint`.
"""

from __future__ import annotations

from typing import Final

U256_MAX: Final[int] = (1 << 256) - 1

__all__ = ["U256_MAX"]
