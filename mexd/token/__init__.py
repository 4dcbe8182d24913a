# -*- coding: utf-8 -*-
"""
mexd.token
==========

Fungible-token building blocks:

- :mod:`mexd.token.ledger`   : balance / allowance state transitions.
- :mod:`mexd.token.metadata` : name, symbol and decimals with validation.

The contract layer (:mod:`mexd.contract`) wires these together with the access
gate; nothing here reads configuration.
"""

from .ledger import Ledger, LedgerState
from .metadata import TokenMetadata

__all__ = ["Ledger", "LedgerState", "TokenMetadata"]
