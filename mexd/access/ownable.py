# -*- coding: utf-8 -*-
"""
mexd.access.ownable
===================

Minimal, deterministic **Ownable** gate for the MEXD token.

This module provides a focused owner state and control surface:
- read the current owner (`current_owner`)
- check that a caller is the owner (`require_owner`)
- transfer ownership to a new account (`transfer_ownership`)
- renounce ownership (clear owner) (`renounce_ownership`)

Conventions
-----------
- Addresses are 20 raw bytes; hex strings are normalized at the boundary.
- "No owner" is the all-zero address, never None.
- Events:
    - "OwnershipTransferred" args: (previousOwner, newOwner)

State machine
-------------
    Owned(a) --transfer_ownership(a, b)--> Owned(b)      (b != ZERO)
    Owned(a) --renounce_ownership(a)-----> Ownerless
    Ownerless is terminal: every privileged call fails with NotOwner.

Safety notes
------------
- `transfer_ownership` rejects the zero address; use `renounce_ownership`
  explicitly to leave the token without an owner.
- The gate is independent of the ledger. Owning the token grants no balance or
  allowance rights.
"""

from __future__ import annotations

from enum import Enum

from ..address import ZERO_ADDRESS, AddressLike, is_zero, to_address, to_hex
from ..errors import InvalidNewOwner, NotOwner
from ..events import Receipt, ownership_transferred_event
from ..logging import get_logger

log = get_logger(__name__)


class GateState(str, Enum):
    OWNED = "OWNED"
    OWNERLESS = "OWNERLESS"


class AccessGate:
    """
    Holds the single owner identity. Initial state is Owned(creator); a
    zero-address creator starts the gate Ownerless.
    """

    def __init__(self, creator: AddressLike):
        self._owner = to_address(creator)

    # --- queries -------------------------------------------------------------

    def current_owner(self) -> bytes:
        """Current owner, or ZERO_ADDRESS once ownership was renounced."""
        return self._owner

    @property
    def state(self) -> GateState:
        return GateState.OWNERLESS if is_zero(self._owner) else GateState.OWNED

    def is_owner(self, caller: AddressLike) -> bool:
        c = to_address(caller)
        return not is_zero(self._owner) and c == self._owner

    def require_owner(self, caller: AddressLike) -> None:
        """
        Raise NotOwner unless `caller` equals the current owner.
        When ownerless this always raises, including for a zero-address caller.
        """
        if not self.is_owner(caller):
            raise NotOwner(data={"caller": to_hex(to_address(caller))})

    # --- transitions ---------------------------------------------------------

    def transfer_ownership(self, caller: AddressLike, new_owner: AddressLike) -> Receipt:
        self.require_owner(caller)
        new = to_address(new_owner)
        if is_zero(new):
            raise InvalidNewOwner()

        previous = self._owner
        self._owner = new
        log.debug(
            "ownership transferred",
            extra={"previous_owner": to_hex(previous), "new_owner": to_hex(new)},
        )
        return Receipt(
            "transferOwnership", None, (ownership_transferred_event(previous, new),)
        )

    def renounce_ownership(self, caller: AddressLike) -> Receipt:
        self.require_owner(caller)

        previous = self._owner
        self._owner = ZERO_ADDRESS
        log.debug("ownership renounced", extra={"previous_owner": to_hex(previous)})
        return Receipt(
            "renounceOwnership",
            None,
            (ownership_transferred_event(previous, ZERO_ADDRESS),),
        )


__all__ = ["AccessGate", "GateState"]
