"""
MEXD token ledger: fixed-supply fungible token with delegated allowances and a
single-owner access gate.

This package exposes only lightweight metadata at import time. Import the
building blocks explicitly from their modules:

    from mexd.contract import Token
    from mexd.token.ledger import Ledger
    from mexd.access.ownable import AccessGate
"""

# Package metadata (robust to missing version module during early bootstraps)
try:
    from .version import __version__  # type: ignore
except Exception:  # pragma: no cover - fallback for fresh checkouts
    __version__ = "0.0.0+local"

__all__ = ["__version__"]
