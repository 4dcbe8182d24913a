"""
mexd.address: account identities.

Accounts are raw 20-byte strings inside the ledger. At every public boundary we
also accept the usual `0x`-prefixed hex presentation and normalize it, so tests and
the CLI can pass "0x9a3f..." while the ledger keys its tables by bytes.

The all-zero address is the sentinel meaning "no account" / "no owner".
"""

from __future__ import annotations

import hashlib
from typing import Final, Union

from .errors import InvalidAddress

ADDRESS_LEN: Final[int] = 20
ZERO_ADDRESS: Final[bytes] = b"\x00" * ADDRESS_LEN

AddressLike = Union[bytes, bytearray, memoryview, str]


def to_address(value: AddressLike) -> bytes:
    """
    Normalize `value` to canonical 20 raw bytes.

    Accepts bytes-like objects of length 20 or hex strings (with or without 0x).
    Raises InvalidAddress for anything else.
    """
    if isinstance(value, str):
        h = value[2:] if value[:2] in ("0x", "0X") else value
        try:
            raw = bytes.fromhex(h)
        except ValueError:
            raise InvalidAddress(data={"address": value}) from None
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise InvalidAddress(data={"type": type(value).__name__})
    if len(raw) != ADDRESS_LEN:
        raise InvalidAddress(data={"len": len(raw)})
    return raw


def is_zero(addr: bytes) -> bool:
    return addr == ZERO_ADDRESS


def to_hex(addr: bytes) -> str:
    return "0x" + bytes(addr).hex()


def derive_address(tag: str) -> bytes:
    """
    Produce a stable 20-byte address from a tag (SHA3-256, first 20 bytes).
    Handy for fixtures and CLI scripts that want named accounts.
    """
    return hashlib.sha3_256(tag.encode("utf-8")).digest()[:ADDRESS_LEN]


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "AddressLike",
    "to_address",
    "is_zero",
    "to_hex",
    "derive_address",
]
