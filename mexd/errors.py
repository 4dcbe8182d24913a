"""
mexd.errors: ledger and access-gate exceptions.

Every rejected operation raises a *typed* exception whose class names the failure
kind. Callers (tests, the contract layer, the replay CLI) assert on the class or on
its stable `code`; the human-readable `message` defaults to the revert reason the
legacy Solidity token produced, so existing tooling that greps for
"ERC20: transfer amount exceeds balance" keeps working.

Hierarchy
---------
LedgerError (base)
 ├─ InsufficientBalance    : debit larger than the holder's balance
 ├─ InsufficientAllowance  : delegated spend larger than the remaining allowance
 ├─ AllowanceUnderflow     : decreaseAllowance below zero
 ├─ InvalidRecipient       : transfer to the zero address
 ├─ InvalidSpender         : approve / increase / decrease for the zero address
 ├─ InvalidNewOwner        : ownership transfer to the zero address
 ├─ NotOwner               : privileged call by a non-owner (or after renounce)
 ├─ ArithmeticOverflow     : checked u256 add/sub left the [0, 2**256-1] domain
 ├─ InvalidAmount          : amount argument is not a non-negative u256 int
 ├─ InvalidAddress         : address argument is not 20 bytes / 0x-hex
 └─ UnknownMethod          : contract dispatch for a name that does not exist

Errors never leave partial state behind: the core validates and stages all writes
before committing, so raising is always equivalent to a full rollback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Type


@dataclass(eq=False)
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation (the revert reason).
        code:    Stable machine code string (e.g., 'INSUFFICIENT_BALANCE').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "ledger error"
    code: str = "LEDGER_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    @property
    def kind(self) -> str:
        """Failure kind, i.e. the concrete class name ('NotOwner', ...)."""
        return type(self).__name__

    @property
    def reason(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for receipts/logs."""
        out: Dict[str, Any] = {"code": self.code, "kind": self.kind, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class _ErrorKind(LedgerError):
    CODE: ClassVar[str] = "LEDGER_ERROR"
    REASON: ClassVar[str] = "ledger error"

    def __init__(self, message: Optional[str] = None, *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message or self.REASON, code=self.CODE, data=data)


class InsufficientBalance(_ErrorKind):
    CODE = "INSUFFICIENT_BALANCE"
    REASON = "ERC20: transfer amount exceeds balance"


class InsufficientAllowance(_ErrorKind):
    CODE = "INSUFFICIENT_ALLOWANCE"
    REASON = "ERC20: transfer amount exceeds allowance"


class AllowanceUnderflow(_ErrorKind):
    CODE = "ALLOWANCE_UNDERFLOW"
    REASON = "ERC20: decreased allowance below zero"


class InvalidRecipient(_ErrorKind):
    CODE = "INVALID_RECIPIENT"
    REASON = "ERC20: transfer to the zero address"


class InvalidSpender(_ErrorKind):
    CODE = "INVALID_SPENDER"
    REASON = "ERC20: approve to the zero address"


class InvalidNewOwner(_ErrorKind):
    CODE = "INVALID_NEW_OWNER"
    REASON = "Ownable: new owner is the zero address"


class NotOwner(_ErrorKind):
    CODE = "NOT_OWNER"
    REASON = "Ownable: caller is not the owner"


class ArithmeticOverflow(_ErrorKind):
    CODE = "ARITHMETIC_OVERFLOW"
    REASON = "arithmetic overflow or underflow"


class InvalidAmount(_ErrorKind):
    CODE = "INVALID_AMOUNT"
    REASON = "amount must be an unsigned 256-bit integer"


class InvalidAddress(_ErrorKind):
    CODE = "INVALID_ADDRESS"
    REASON = "address must be 20 bytes"


class UnknownMethod(_ErrorKind):
    CODE = "UNKNOWN_METHOD"
    REASON = "no such contract method"


ERROR_KINDS: Dict[str, Type[LedgerError]] = {
    cls.CODE: cls
    for cls in (
        InsufficientBalance,
        InsufficientAllowance,
        AllowanceUnderflow,
        InvalidRecipient,
        InvalidSpender,
        InvalidNewOwner,
        NotOwner,
        ArithmeticOverflow,
        InvalidAmount,
        InvalidAddress,
        UnknownMethod,
    )
}


def error_to_receipt_fields(err: LedgerError) -> Dict[str, Any]:
    """
    Map a LedgerError to canonical receipt-like fields:

        {"status": "REVERT", "error": {code, kind, message, data?}}
    """
    return {"status": "REVERT", "error": err.to_dict()}


__all__ = [
    "LedgerError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "AllowanceUnderflow",
    "InvalidRecipient",
    "InvalidSpender",
    "InvalidNewOwner",
    "NotOwner",
    "ArithmeticOverflow",
    "InvalidAmount",
    "InvalidAddress",
    "UnknownMethod",
    "ERROR_KINDS",
    "error_to_receipt_fields",
]
