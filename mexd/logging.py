"""
mexd.logging
------------

Structured logging for the ledger, built on the standard `logging` package.

- Context-local fields in a `ContextVar` (trace_id, component, method, caller),
  merged into every record emitted while they are bound.
- Two formatters: one JSON object per line, or a compact ` | `-separated text
  line (colored on a TTY).
- Addresses and other bytes render as 0x-hex in both formats.

Usage
-----
    from mexd import logging as mlog

    mlog.configure(json=False, level="DEBUG")
    log = mlog.get_logger(__name__)

    with mlog.trace_scope():
        mlog.bind(component="replay")
        log.info("token deployed", extra={"supply": 10**27})

Library modules only call `get_logger`. Installing handlers is up to the host
(the CLI, a test, an embedding service).
"""

from __future__ import annotations

import datetime as _dt
import json as _json
import logging
import os
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Any, Dict, Iterator, Mapping, Optional, Tuple, Union

ROOT_LOGGER = "mexd"

CONTEXT_KEYS: Tuple[str, ...] = ("trace_id", "component", "method", "caller")

_CONTEXT: ContextVar[Mapping[str, Any]] = ContextVar("mexd_log_context", default={})

# Attributes every LogRecord carries; anything else on a record came from `extra`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_COLORS = {
    logging.DEBUG: "90",
    logging.INFO: "32",
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "1;35",
}


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


def context() -> Dict[str, Any]:
    """Copy of the fields bound in the current context."""
    return dict(_CONTEXT.get())


def bind(**fields: Any) -> None:
    _CONTEXT.set({**_CONTEXT.get(), **{k: jsonable(v) for k, v in fields.items()}})


def unbind(*keys: str) -> None:
    _CONTEXT.set({k: v for k, v in _CONTEXT.get().items() if k not in keys})


def clear_context() -> None:
    _CONTEXT.set({})


def new_trace_id() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """
    Bind a trace_id (fresh unless given) for the duration of the block. Every
    field bound inside the block is dropped on exit.
    """
    token = _CONTEXT.set({**_CONTEXT.get(), "trace_id": trace_id or new_trace_id()})
    try:
        yield _CONTEXT.get()["trace_id"]
    finally:
        _CONTEXT.reset(token)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def jsonable(v: Any) -> Any:
    """Render `v` as a JSON-friendly value (bytes as 0x-hex)."""
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return "0x" + bytes(v).hex()
    if isinstance(v, Enum):
        return jsonable(v.value)
    if isinstance(v, Mapping):
        return {str(k): jsonable(x) for k, x in v.items()}
    if isinstance(v, (list, tuple, set, frozenset)):
        return [jsonable(x) for x in v]
    if isinstance(v, _dt.datetime):
        return (v if v.tzinfo else v.replace(tzinfo=_dt.timezone.utc)).isoformat()
    if isinstance(v, Path):
        return str(v)
    if is_dataclass(v) and not isinstance(v, type):
        return jsonable(asdict(v))
    return str(v)


def _timestamp(record: logging.LogRecord) -> str:
    ts = _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc)
    return ts.isoformat(timespec="milliseconds")


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: v
        for k, v in vars(record).items()
        if k not in _RECORD_ATTRS and not k.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, context, extras, err."""

    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        out.update(context())
        for k, v in _record_extras(record).items():
            out.setdefault(k, jsonable(v))
        if record.exc_info:
            out["err"] = self.formatException(record.exc_info)
        return _json.dumps(out, separators=(",", ":"), default=str)


class TextFormatter(logging.Formatter):
    """
    `ts | LEVEL | logger | ctx k=v extra k=v | message`, e.g.

        2025-01-05T12:34:56.789+00:00 | DEBUG | mexd.token.ledger | trace_id=3f2a op=transfer | transfer committed
    """

    def __init__(self, stream: Optional[IO[str]] = None, *, color: Optional[bool] = None):
        super().__init__()
        self.color = _is_tty(stream) if color is None else color

    def _paint(self, code: str, text: str) -> str:
        return f"\x1b[{code}m{text}\x1b[0m" if self.color else text

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        parts = [
            self._paint("90", _timestamp(record)),
            self._paint(_COLORS.get(record.levelno, "37"), f"{record.levelname:<5}"),
            self._paint("36", record.name),
        ]
        kv = [f"{k}={ctx[k]}" for k in CONTEXT_KEYS if ctx.get(k) is not None]
        kv += [
            f"{k}={jsonable(v)}"
            for k, v in _record_extras(record).items()
            if k not in ctx and k not in CONTEXT_KEYS
        ]
        if kv:
            parts.append(" ".join(kv))
        parts.append(record.getMessage())
        line = " | ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _is_tty(stream: Any) -> bool:
    if stream is None or os.environ.get("NO_COLOR") is not None:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def _level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def _use_json(flag: Optional[bool], stream: Any) -> bool:
    if flag is not None:
        return flag
    fmt = os.environ.get("MEXD_LOG_FORMAT", "").strip().lower()
    if fmt in ("json", "text"):
        return fmt == "json"
    # Interactive terminals get text, pipes and services get JSON.
    return not _is_tty(stream)


def configure(
    *,
    json: Optional[bool] = None,
    level: Union[str, int] = "INFO",
    stream: Optional[IO[str]] = None,
    file_path: Optional[Union[str, Path]] = None,
    keep_handlers: bool = False,
) -> logging.Logger:
    """
    Install handlers on the `mexd` logger and return it.

    json       : force JSON (True) or text (False); None reads MEXD_LOG_FORMAT,
                 then falls back to TTY detection.
    level      : minimum level for the logger and its handlers.
    stream     : console stream (default: the current sys.stderr).
    file_path  : also append JSON lines to this file (parents are created).
    keep_handlers : leave previously installed handlers in place.
    """
    stream = stream if stream is not None else sys.stderr
    lvl = _level(level)
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(lvl)
    if not keep_handlers:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()

    console = logging.StreamHandler(stream)
    console.setLevel(lvl)
    console.setFormatter(JSONFormatter() if _use_json(json, stream) else TextFormatter(stream))
    root.addHandler(console)

    if file_path:
        path = Path(file_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(lvl)
        fh.setFormatter(JSONFormatter())
        root.addHandler(fh)
    return root


def configure_from_config(cfg: Any, *, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Apply `LedgerConfig.logging` (level, format, file)."""
    lc = cfg.logging
    return configure(
        json=None if lc.format is None else lc.format == "json",
        level=lc.level,
        stream=stream,
        file_path=lc.file,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or ROOT_LOGGER)


class ContextAdapter(logging.LoggerAdapter):
    """Adds constant fields to every call; call-site `extra` keys win."""

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def with_fields(logger: logging.Logger, **fields: Any) -> ContextAdapter:
    return ContextAdapter(logger, {k: jsonable(v) for k, v in fields.items()})


__all__ = [
    "CONTEXT_KEYS",
    "context",
    "bind",
    "unbind",
    "clear_context",
    "new_trace_id",
    "trace_scope",
    "jsonable",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "configure_from_config",
    "get_logger",
    "ContextAdapter",
    "with_fields",
]
