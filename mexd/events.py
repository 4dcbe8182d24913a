"""
mexd.events: ledger events, call receipts and an in-memory event log.

The core (Ledger / AccessGate) never performs I/O: each successful mutating call
returns a `Receipt` carrying the call's result and the events it produced, in
emission order. The contract layer appends those events to an `EventLog`, the
append-only side channel external indexers would consume.

Event shapes are fixed for compatibility with existing log consumers (field order
matters and is preserved):

    Transfer(from, to, value)
    Approval(owner, spender, value)
    OwnershipTransferred(previousOwner, newOwner)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

EVT_TRANSFER = "Transfer"
EVT_APPROVAL = "Approval"
EVT_OWNERSHIP_TRANSFERRED = "OwnershipTransferred"


def _jsonable(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return v


# =============================================================================
# Public data model
# =============================================================================


@dataclass(frozen=True)
class Event:
    """
    A single emitted event: a name plus ordered (field, value) pairs.

    Values are raw (addresses as bytes, amounts as int); use `to_dict()` for a
    JSON-friendly rendering.
    """

    name: str
    fields: Tuple[Tuple[str, Any], ...]

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.fields)

    def get(self, key: str, default: Any = None) -> Any:
        for k, v in self.fields:
            if k == key:
                return v
        return default

    def __getitem__(self, key: str) -> Any:
        for k, v in self.fields:
            if k == key:
                return v
        raise KeyError(key)

    def args(self) -> Dict[str, Any]:
        """Fields as an (insertion-ordered) dict of raw values."""
        return dict(self.fields)

    def matches(self, name: Optional[str] = None, **fields: Any) -> bool:
        if name is not None and name != self.name:
            return False
        args = self.args()
        return all(k in args and args[k] == v for k, v in fields.items())

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, "args": {k: _jsonable(v) for k, v in self.fields}}


def transfer_event(sender: bytes, recipient: bytes, value: int) -> Event:
    return Event(EVT_TRANSFER, (("from", sender), ("to", recipient), ("value", value)))


def approval_event(owner: bytes, spender: bytes, value: int) -> Event:
    return Event(EVT_APPROVAL, (("owner", owner), ("spender", spender), ("value", value)))


def ownership_transferred_event(previous_owner: bytes, new_owner: bytes) -> Event:
    return Event(
        EVT_OWNERSHIP_TRANSFERRED,
        (("previousOwner", previous_owner), ("newOwner", new_owner)),
    )


@dataclass(frozen=True)
class Receipt:
    """
    Outcome of a successful state-mutating call.

    Fields
    ------
    method : str
        Entry point that produced the receipt ("transfer", "renounceOwnership", ...).
    result : Any
        Return value of the call (True for ledger operations, None for the gate).
    events : tuple[Event, ...]
        Events emitted by the call, in emission order.
    """

    method: str
    result: Any = None
    events: Tuple[Event, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "status": "SUCCESS",
            "result": self.result,
            "events": [e.to_dict() for e in self.events],
        }


@dataclass(frozen=True)
class LogRecord:
    """An event stored in the log together with its 0-based position."""

    log_index: int
    event: Event

    @property
    def name(self) -> str:
        return self.event.name

    def to_dict(self) -> Dict[str, Any]:
        out = self.event.to_dict()
        out["logIndex"] = self.log_index
        return out


# =============================================================================
# In-memory sink
# =============================================================================


class EventLog:
    """
    Append-only in-memory event log.

    Records are never mutated or removed; `log_index` strictly increases in
    append order.
    """

    def __init__(self) -> None:
        self._records: List[LogRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LogRecord]:
        return iter(list(self._records))

    def append(self, event: Event) -> LogRecord:
        rec = LogRecord(log_index=len(self._records), event=event)
        self._records.append(rec)
        return rec

    def extend(self, events: Iterable[Event]) -> List[LogRecord]:
        return [self.append(e) for e in events]

    def records(self) -> Tuple[LogRecord, ...]:
        return tuple(self._records)

    def filter(self, name: Optional[str] = None, **fields: Any) -> List[LogRecord]:
        """Records whose event has `name` (if given) and equal values for `fields`."""
        return [r for r in self._records if r.event.matches(name, **fields)]


__all__ = [
    "EVT_TRANSFER",
    "EVT_APPROVAL",
    "EVT_OWNERSHIP_TRANSFERRED",
    "Event",
    "transfer_event",
    "approval_event",
    "ownership_transferred_event",
    "Receipt",
    "LogRecord",
    "EventLog",
]
