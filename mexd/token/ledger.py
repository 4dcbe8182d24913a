# -*- coding: utf-8 -*-
"""
MEXD fungible-token ledger
==========================

Fixed-supply, float-free, ERC-20-like balance and allowance bookkeeping with an
explicit-caller API surface (no ambient msg.sender).

Highlights
----------
- The whole supply is minted to the creator at construction and never changes
  (no mint / burn).
- Checked u256 math via `mexd.math.safe_uint` (no silent wrap).
- Every mutating call validates, stages its writes in a `_WriteSet`, then
  commits them in one step. A failing call raises before anything is committed,
  so state is either fully updated or untouched.
- Events are *returned* on the call's `Receipt` instead of written anywhere:
    Transfer(from, to, value)
    Approval(owner, spender, value)

Public interface
----------------
# views (pure)
total_supply() -> int
balance_of(account) -> int
allowance(owner, spender) -> int

# state-changing (explicit caller)
transfer(caller, to, amount) -> Receipt
approve(caller, spender, amount) -> Receipt
increase_allowance(caller, spender, added) -> Receipt
decrease_allowance(caller, spender, subtracted) -> Receipt
transfer_from(caller, owner, to, amount) -> Receipt

Invariants
----------
- sum(balances) == total supply after every call.
- Balances and allowances are never negative; zero entries are not stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from ..address import AddressLike, is_zero, to_address, to_hex
from ..errors import (AllowanceUnderflow, InsufficientAllowance,
                      InsufficientBalance, InvalidRecipient, InvalidSpender)
from ..events import Receipt, approval_event, transfer_event
from ..logging import get_logger
from ..math import U256_MAX
from ..math.safe_uint import require_amount, try_sub_u256, u256_add

log = get_logger(__name__)

AllowanceKey = Tuple[bytes, bytes]


# ------------------------------------------------------------------------------
# State
# ------------------------------------------------------------------------------


@dataclass
class LedgerState:
    """
    Explicit ledger state owned by one Ledger instance.

    `balances` and `allowances` only hold non-zero entries; missing keys read as 0.
    """

    total_supply: int
    balances: Dict[bytes, int] = field(default_factory=dict)
    allowances: Dict[AllowanceKey, int] = field(default_factory=dict)

    def copy(self) -> "LedgerState":
        return LedgerState(
            total_supply=self.total_supply,
            balances=dict(self.balances),
            allowances=dict(self.allowances),
        )

    def sum_balances(self) -> int:
        return sum(self.balances.values())


class _WriteSet:
    """
    Staged writes for a single call. Reads see staged values first, then the
    committed state, so a call that touches the same key twice (self-transfer)
    composes correctly.
    """

    def __init__(self, state: LedgerState) -> None:
        self._state = state
        self.balances: Dict[bytes, int] = {}
        self.allowances: Dict[AllowanceKey, int] = {}

    def balance(self, addr: bytes) -> int:
        if addr in self.balances:
            return self.balances[addr]
        return self._state.balances.get(addr, 0)

    def allowance(self, key: AllowanceKey) -> int:
        if key in self.allowances:
            return self.allowances[key]
        return self._state.allowances.get(key, 0)

    def commit(self) -> None:
        for addr, value in self.balances.items():
            _store(self._state.balances, addr, value)
        for key, value in self.allowances.items():
            _store(self._state.allowances, key, value)


def _store(table: Dict, key, value: int) -> None:
    if value == 0:
        table.pop(key, None)
    else:
        table[key] = value


# ------------------------------------------------------------------------------
# Ledger
# ------------------------------------------------------------------------------


class Ledger:
    """
    Balance / allowance ledger for a fixed total supply.

    Args:
        creator: account receiving the entire supply.
        total_supply: fixed supply in base units.
        strict_u256: bound every amount and stored value to 2**256 - 1
            (overflow raises ArithmeticOverflow). When False, Python's unbounded
            ints are used and only negative results are rejected.
    """

    def __init__(self, creator: AddressLike, total_supply: int, *, strict_u256: bool = True):
        self._bound: Optional[int] = U256_MAX if strict_u256 else None
        self.creator = to_address(creator)
        supply = require_amount(total_supply, bound=self._bound)
        self._state = LedgerState(total_supply=supply)
        _store(self._state.balances, self.creator, supply)
        log.debug(
            "ledger created",
            extra={"creator": to_hex(self.creator), "supply": supply},
        )

    # --------------------------------------------------------------------------
    # Views
    # --------------------------------------------------------------------------

    @property
    def strict_u256(self) -> bool:
        return self._bound is not None

    def total_supply(self) -> int:
        return self._state.total_supply

    def balance_of(self, account: AddressLike) -> int:
        return self._state.balances.get(to_address(account), 0)

    def allowance(self, owner: AddressLike, spender: AddressLike) -> int:
        return self._state.allowances.get((to_address(owner), to_address(spender)), 0)

    def balances(self) -> Mapping[bytes, int]:
        """Copy of the non-zero balance table."""
        return dict(self._state.balances)

    def allowances(self) -> Mapping[AllowanceKey, int]:
        """Copy of the non-zero allowance table."""
        return dict(self._state.allowances)

    def snapshot(self) -> LedgerState:
        return self._state.copy()

    def supply_is_conserved(self) -> bool:
        return self._state.sum_balances() == self._state.total_supply

    # --------------------------------------------------------------------------
    # Mutations (explicit caller)
    # --------------------------------------------------------------------------

    def transfer(self, caller: AddressLike, to: AddressLike, amount: int) -> Receipt:
        sender = to_address(caller)
        recipient = to_address(to)
        amount = self._amount(amount)
        if is_zero(recipient):
            raise InvalidRecipient(data={"from": to_hex(sender)})

        ws = _WriteSet(self._state)
        self._move(ws, sender, recipient, amount)
        ws.commit()

        self._log("transfer", sender, to=recipient, amount=amount)
        return Receipt("transfer", True, (transfer_event(sender, recipient, amount),))

    def approve(self, caller: AddressLike, spender: AddressLike, amount: int) -> Receipt:
        owner = to_address(caller)
        spender_b = to_address(spender)
        amount = self._amount(amount)
        if is_zero(spender_b):
            raise InvalidSpender(data={"owner": to_hex(owner)})

        ws = _WriteSet(self._state)
        ws.allowances[(owner, spender_b)] = amount
        ws.commit()

        self._log("approve", owner, spender=spender_b, amount=amount)
        return Receipt("approve", True, (approval_event(owner, spender_b, amount),))

    def increase_allowance(self, caller: AddressLike, spender: AddressLike, added: int) -> Receipt:
        """
        Add `added` to the allowance of `spender` over the caller's balance.

        Succeeds regardless of the caller's balance: an allowance is a credit
        line, and balance sufficiency is only enforced when it is spent.
        """
        owner = to_address(caller)
        spender_b = to_address(spender)
        added = self._amount(added)
        if is_zero(spender_b):
            raise InvalidSpender(data={"owner": to_hex(owner)})

        ws = _WriteSet(self._state)
        key = (owner, spender_b)
        new_amount = u256_add(ws.allowance(key), added, bound=self._bound)
        ws.allowances[key] = new_amount
        ws.commit()

        self._log("increaseAllowance", owner, spender=spender_b, amount=new_amount)
        return Receipt(
            "increaseAllowance", True, (approval_event(owner, spender_b, new_amount),)
        )

    def decrease_allowance(
        self, caller: AddressLike, spender: AddressLike, subtracted: int
    ) -> Receipt:
        owner = to_address(caller)
        spender_b = to_address(spender)
        subtracted = self._amount(subtracted)
        if is_zero(spender_b):
            # Same reason string as the underflow case, for log-compatibility.
            raise InvalidSpender(AllowanceUnderflow.REASON, data={"owner": to_hex(owner)})

        ws = _WriteSet(self._state)
        key = (owner, spender_b)
        current = ws.allowance(key)
        new_amount = try_sub_u256(current, subtracted)
        if new_amount is None:
            raise AllowanceUnderflow(
                data={"allowance": current, "subtracted": subtracted}
            )
        ws.allowances[key] = new_amount
        ws.commit()

        self._log("decreaseAllowance", owner, spender=spender_b, amount=new_amount)
        return Receipt(
            "decreaseAllowance", True, (approval_event(owner, spender_b, new_amount),)
        )

    def transfer_from(
        self, caller: AddressLike, owner: AddressLike, to: AddressLike, amount: int
    ) -> Receipt:
        """
        Spender (`caller`) moves `amount` from `owner` to `to` using its allowance.
        Emits Transfer then Approval (with the remaining allowance).
        """
        spender = to_address(caller)
        holder = to_address(owner)
        recipient = to_address(to)
        amount = self._amount(amount)
        if is_zero(recipient):
            raise InvalidRecipient(data={"from": to_hex(holder)})

        ws = _WriteSet(self._state)
        key = (holder, spender)
        current = ws.allowance(key)
        remaining = try_sub_u256(current, amount)
        if remaining is None:
            raise InsufficientAllowance(data={"allowance": current, "amount": amount})
        self._move(ws, holder, recipient, amount)
        ws.allowances[key] = remaining
        ws.commit()

        self._log("transferFrom", spender, owner=holder, to=recipient, amount=amount)
        return Receipt(
            "transferFrom",
            True,
            (
                transfer_event(holder, recipient, amount),
                approval_event(holder, spender, remaining),
            ),
        )

    # --------------------------------------------------------------------------
    # Internals
    # --------------------------------------------------------------------------

    def _amount(self, n: int) -> int:
        return require_amount(n, bound=self._bound)

    def _move(self, ws: _WriteSet, sender: bytes, recipient: bytes, amount: int) -> None:
        """Stage debit of `sender` and credit of `recipient` (same address allowed)."""
        bal = ws.balance(sender)
        new_from = try_sub_u256(bal, amount)
        if new_from is None:
            raise InsufficientBalance(
                data={"account": to_hex(sender), "balance": bal, "amount": amount}
            )
        ws.balances[sender] = new_from
        ws.balances[recipient] = u256_add(ws.balance(recipient), amount, bound=self._bound)

    def _log(self, op: str, caller: bytes, **fields) -> None:
        extra = {"op": op, "caller": to_hex(caller)}
        for k, v in fields.items():
            extra[k] = to_hex(v) if isinstance(v, bytes) else v
        log.debug("%s committed", op, extra=extra)


__all__ = ["Ledger", "LedgerState"]
