"""
mexd.config: runtime configuration for the MEXD token ledger.

This module centralizes knobs for:
  • Token deployment defaults (name, symbol, decimals, total supply)
  • Arithmetic envelope (strict 256-bit bounds vs. unbounded Python ints)
  • Logging (level, format, optional JSON file)

Configuration may be provided via environment variables. Safe defaults reproduce the
MEX DIGITAL token (1,000,000,000 MEXD with 18 decimals) so a local run works out of
the box.

Environment variables (all optional):
  MEXD_TOKEN_NAME        -> token name (default: "MEX DIGITAL")
  MEXD_TOKEN_SYMBOL      -> token symbol (default: "MEXD")
  MEXD_TOKEN_DECIMALS    -> integer 0..36 (default: 18)
  MEXD_TOTAL_SUPPLY      -> integer literal, "_" separators / 0x allowed
                            (default: 1_000_000_000 * 10**18)
  MEXD_STRICT_U256       -> 0/1/true/false (default: 1)
  MEXD_LOG_LEVEL         -> DEBUG/INFO/... (default: INFO)
  MEXD_LOG_FORMAT        -> json|text (default: auto, by TTY detection)
  MEXD_LOG_FILE          -> optional path for an extra JSON log file

Programmatic usage:
    from mexd.config import get_config
    cfg = get_config()
    token = Token.deploy(creator, config=cfg)

Note: This module does not perform any I/O beyond reading env vars.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .math import U256_MAX
from .token.metadata import require_decimals, require_name, require_symbol

DEFAULT_NAME = "MEX DIGITAL"
DEFAULT_SYMBOL = "MEXD"
DEFAULT_DECIMALS = 18
DEFAULT_TOTAL_SUPPLY = 1_000_000_000 * 10**DEFAULT_DECIMALS

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")

# ----------------------------- helpers -------------------------------------


_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}


def _bool_env(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    # Be forgiving: non-empty → True, empty → default
    return bool(v) if v != "" else default


def _parse_int(s: Union[str, int]) -> int:
    """
    Parse integer literals: 1000, "1_000_000", "0x3b9aca00".
    """
    if isinstance(s, bool):
        raise ValueError(f"invalid integer: {s!r}")
    if isinstance(s, int):
        return s
    try:
        return int(str(s).strip(), 0)
    except ValueError:
        raise ValueError(f"invalid integer: {s!r}") from None


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class TokenConfig:
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    decimals: int = DEFAULT_DECIMALS
    total_supply: int = DEFAULT_TOTAL_SUPPLY
    strict_u256: bool = True

    @property
    def amount_bound(self) -> Optional[int]:
        """Upper bound for amounts and stored values (None when unbounded)."""
        return U256_MAX if self.strict_u256 else None


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: Optional[str] = None  # None = auto (text on a TTY, JSON otherwise)
    file: Optional[Path] = None


@dataclass(frozen=True)
class LedgerConfig:
    token: TokenConfig = field(default_factory=TokenConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["logging"]["file"] = str(self.logging.file) if self.logging.file else None
        return d


# ------------------------------ loader --------------------------------------


def validate_token(t: TokenConfig) -> TokenConfig:
    require_name(t.name)
    require_symbol(t.symbol)
    require_decimals(t.decimals)
    if isinstance(t.total_supply, bool) or not isinstance(t.total_supply, int):
        raise ValueError("total_supply must be an integer")
    if t.total_supply < 0:
        raise ValueError("total_supply must be ≥ 0")
    if t.strict_u256 and t.total_supply > U256_MAX:
        raise ValueError("total_supply exceeds 2**256 - 1")
    return t


def _validate_logging(lc: LoggingConfig) -> LoggingConfig:
    if lc.level.upper() not in _LOG_LEVELS:
        raise ValueError(f"unknown log level: {lc.level!r}")
    if lc.format is not None and lc.format not in ("json", "text"):
        raise ValueError(f"log format must be 'json' or 'text', got {lc.format!r}")
    return lc


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> LedgerConfig:
    """
    Build a LedgerConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support:
          'name', 'symbol', 'decimals', 'total_supply', 'strict_u256',
          'log_level', 'log_format', 'log_file'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    token = TokenConfig(
        name=str(overrides.get("name", env.get("MEXD_TOKEN_NAME", DEFAULT_NAME))),
        symbol=str(overrides.get("symbol", env.get("MEXD_TOKEN_SYMBOL", DEFAULT_SYMBOL))),
        decimals=_parse_int(
            overrides.get("decimals", env.get("MEXD_TOKEN_DECIMALS", DEFAULT_DECIMALS))
        ),
        total_supply=_parse_int(
            overrides.get("total_supply", env.get("MEXD_TOTAL_SUPPLY", DEFAULT_TOTAL_SUPPLY))
        ),
        strict_u256=(
            bool(overrides["strict_u256"])
            if "strict_u256" in overrides
            else _bool_env(env.get("MEXD_STRICT_U256"), True)
        ),
    )
    token = validate_token(token)

    fmt = overrides.get("log_format", env.get("MEXD_LOG_FORMAT"))
    log_file = overrides.get("log_file", env.get("MEXD_LOG_FILE"))
    logging_cfg = _validate_logging(
        LoggingConfig(
            level=str(overrides.get("log_level", env.get("MEXD_LOG_LEVEL", "INFO"))).upper(),
            format=(str(fmt).strip().lower() or None) if fmt is not None else None,
            file=Path(log_file).expanduser() if log_file else None,
        )
    )

    return LedgerConfig(token=token, logging=logging_cfg)


@lru_cache(maxsize=1)
def get_config() -> LedgerConfig:
    """
    Cached global config. Suitable for application bootstraps and module-level consumers.
    """
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def summary(cfg: Optional[LedgerConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the most important knobs.
    """
    cfg = cfg or get_config()
    t = cfg.token
    lc = cfg.logging
    return (
        "mexd{"
        f"name={t.name!r}, symbol={t.symbol}, decimals={t.decimals}, "
        f"supply={t.total_supply}, strict_u256={int(t.strict_u256)}, "
        f"log={lc.level}/{lc.format or 'auto'}"
        "}"
    )


__all__ = [
    "DEFAULT_NAME",
    "DEFAULT_SYMBOL",
    "DEFAULT_DECIMALS",
    "DEFAULT_TOTAL_SUPPLY",
    "TokenConfig",
    "LoggingConfig",
    "LedgerConfig",
    "validate_token",
    "load_config",
    "get_config",
    "summary",
]
