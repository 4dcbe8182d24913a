# -*- coding: utf-8 -*-
"""
mexd.contract
=============

The deployable MEXD token: metadata + Ledger + AccessGate + an event log.

    from mexd.contract import Token

    token = Token.deploy(creator)                  # MEX DIGITAL / MEXD / 18 / 1e27
    token.transfer(creator, recipient, 200_000)
    token.call("balanceOf", None, recipient)       # -> 200000
    token.call("transferOwnership", creator, other)
    token.filter_logs("Transfer", to=recipient)

Every mutating method delegates to the core, appends the returned events to
`token.logs` and returns the core's `Receipt`. Failed calls raise a
`mexd.errors.LedgerError` subclass and leave both state and log untouched.

`call()` dispatches by the Solidity ABI name (camelCase) or the Python name
(snake_case). Views ignore the caller argument.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from .access.ownable import AccessGate, GateState
from .address import ZERO_ADDRESS, AddressLike, to_address, to_hex
from .config import LedgerConfig, TokenConfig, get_config
from .errors import LedgerError, UnknownMethod
from .events import (EventLog, LogRecord, Receipt, ownership_transferred_event,
                     transfer_event)
from .logging import get_logger
from .token.ledger import Ledger
from .token.metadata import TokenMetadata

log = get_logger(__name__)

# ABI (camelCase) name -> (attribute, is_view)
_ABI: Dict[str, Tuple[str, bool]] = {
    "name": ("name", True),
    "symbol": ("symbol", True),
    "decimals": ("decimals", True),
    "totalSupply": ("total_supply", True),
    "balanceOf": ("balance_of", True),
    "allowance": ("allowance", True),
    "getOwner": ("get_owner", True),
    "owner": ("get_owner", True),
    "transfer": ("transfer", False),
    "approve": ("approve", False),
    "increaseAllowance": ("increase_allowance", False),
    "decreaseAllowance": ("decrease_allowance", False),
    "transferFrom": ("transfer_from", False),
    "transferOwnership": ("transfer_ownership", False),
    "renounceOwnership": ("renounce_ownership", False),
}

_METHODS: Dict[str, Tuple[str, bool]] = dict(_ABI)
_METHODS.update({attr: (attr, view) for attr, view in _ABI.values()})
_METHODS["current_owner"] = ("get_owner", True)


class Token:
    """A deployed token instance. Build it with `Token.deploy`."""

    def __init__(
        self,
        creator: AddressLike,
        metadata: TokenMetadata,
        total_supply: int,
        *,
        strict_u256: bool = True,
    ):
        self.creator = to_address(creator)
        self.metadata = metadata
        self.ledger = Ledger(self.creator, total_supply, strict_u256=strict_u256)
        self.gate = AccessGate(self.creator)
        self.logs = EventLog()
        self.deploy_receipt = Receipt(
            "constructor",
            None,
            (
                transfer_event(ZERO_ADDRESS, self.creator, self.ledger.total_supply()),
                ownership_transferred_event(ZERO_ADDRESS, self.creator),
            ),
        )
        self.logs.extend(self.deploy_receipt.events)

    @classmethod
    def deploy(
        cls,
        creator: AddressLike,
        *,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
        decimals: Optional[int] = None,
        total_supply: Optional[int] = None,
        config: Optional[LedgerConfig] = None,
    ) -> "Token":
        """
        Deploy a fresh token. Unset arguments fall back to `config.token`
        (default: the process-wide `get_config()`).

        Raises ValueError for malformed metadata, InvalidAddress / InvalidAmount
        for a malformed creator or supply.
        """
        tc: TokenConfig = (config or get_config()).token
        meta = TokenMetadata(
            name=tc.name if name is None else name,
            symbol=tc.symbol if symbol is None else symbol,
            decimals=tc.decimals if decimals is None else decimals,
        )
        supply = tc.total_supply if total_supply is None else total_supply
        token = cls(creator, meta, supply, strict_u256=tc.strict_u256)
        log.info(
            "token deployed",
            extra={
                "creator": to_hex(token.creator),
                "symbol": meta.symbol,
                "supply": token.total_supply(),
            },
        )
        return token

    # --- metadata ------------------------------------------------------------

    def name(self) -> str:
        return self.metadata.name

    def symbol(self) -> str:
        return self.metadata.symbol

    def decimals(self) -> int:
        return self.metadata.decimals

    # --- ledger / gate views ---------------------------------------------------

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def balance_of(self, account: AddressLike) -> int:
        return self.ledger.balance_of(account)

    def allowance(self, owner: AddressLike, spender: AddressLike) -> int:
        return self.ledger.allowance(owner, spender)

    def get_owner(self) -> bytes:
        return self.gate.current_owner()

    current_owner = get_owner

    @property
    def gate_state(self) -> GateState:
        return self.gate.state

    # --- mutations -------------------------------------------------------------

    def transfer(self, caller: AddressLike, to: AddressLike, amount: int) -> Receipt:
        return self._apply("transfer", caller, self.ledger.transfer, to, amount)

    def approve(self, caller: AddressLike, spender: AddressLike, amount: int) -> Receipt:
        return self._apply("approve", caller, self.ledger.approve, spender, amount)

    def increase_allowance(self, caller: AddressLike, spender: AddressLike, added: int) -> Receipt:
        return self._apply(
            "increaseAllowance", caller, self.ledger.increase_allowance, spender, added
        )

    def decrease_allowance(
        self, caller: AddressLike, spender: AddressLike, subtracted: int
    ) -> Receipt:
        return self._apply(
            "decreaseAllowance", caller, self.ledger.decrease_allowance, spender, subtracted
        )

    def transfer_from(
        self, caller: AddressLike, owner: AddressLike, to: AddressLike, amount: int
    ) -> Receipt:
        return self._apply(
            "transferFrom", caller, self.ledger.transfer_from, owner, to, amount
        )

    def transfer_ownership(self, caller: AddressLike, new_owner: AddressLike) -> Receipt:
        return self._apply(
            "transferOwnership", caller, self.gate.transfer_ownership, new_owner
        )

    def renounce_ownership(self, caller: AddressLike) -> Receipt:
        return self._apply("renounceOwnership", caller, self.gate.renounce_ownership)

    # --- dispatch --------------------------------------------------------------

    def call(self, method: str, caller: Optional[AddressLike], *args: Any) -> Any:
        """
        Invoke `method` by ABI or Python name. Views return their value;
        mutations return a Receipt.
        """
        try:
            attr, is_view = _METHODS[method]
        except KeyError:
            raise UnknownMethod(data={"method": method}) from None
        fn: Callable[..., Any] = getattr(self, attr)
        if is_view:
            return fn(*args)
        return fn(caller, *args)

    @staticmethod
    def methods() -> List[str]:
        """ABI method names accepted by `call`."""
        return sorted(_ABI)

    # --- logs ------------------------------------------------------------------

    def filter_logs(self, name: Optional[str] = None, **fields: Any) -> List[LogRecord]:
        """
        Query the event log. Address fields may be given as bytes or 0x-hex.
        """
        norm = {
            k: to_address(v) if isinstance(v, str) and v[:2] in ("0x", "0X") else v
            for k, v in fields.items()
        }
        return self.logs.filter(name, **norm)

    # --- internals -------------------------------------------------------------

    def _apply(self, method: str, caller: AddressLike, fn: Callable[..., Receipt], *args: Any) -> Receipt:
        try:
            receipt = fn(caller, *args)
        except LedgerError as e:
            log.info(
                "call rejected",
                extra={"op": method, "code": e.code, "reason": e.message},
            )
            raise
        self.logs.extend(receipt.events)
        return receipt


__all__ = ["Token"]
