"""
mexd: command-line tool for the MEXD token ledger.

Implements:
  - mexd info       Resolved configuration and token metadata
  - mexd replay     Deploy a fresh token and replay a JSON call script

Replay script format:

    {
      "creator": "0x9a3f...",               # optional; --creator wins
      "calls": [
        {"method": "transfer", "caller": "@creator", "args": ["@alice", 200000]},
        {"method": "balanceOf", "args": ["@alice"]},
        {"method": "renounceOwnership", "caller": "@creator"}
      ]
    }

Addresses are 0x-hex, or "@name" for a stable address derived from `name`
(SHA3-256, first 20 bytes). "@creator" is the deploying account. Methods take
the Solidity ABI names or the Python names.

Exit codes: 0 ok, 1 a call reverted under --stop-on-error, 2 bad input.

Examples:
  mexd info --json
  mexd replay calls.json --text
  MEXD_TOTAL_SUPPLY=1_000 mexd replay calls.json --stop-on-error
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from . import logging as mlog
from .address import derive_address, to_address, to_hex
from .config import LedgerConfig, load_config, summary
from .contract import Token
from .errors import LedgerError, error_to_receipt_fields
from .events import Receipt
from .version import __version__, version_metadata

app = typer.Typer(
    name="mexd",
    help="MEXD fixed-supply token ledger",
    no_args_is_help=True,
    add_completion=False,
)

log = mlog.get_logger("mexd.cli")


class ScriptError(ValueError):
    """Malformed replay script."""


def _pretty(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def _hexify(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return v


def _load_cfg() -> LedgerConfig:
    try:
        return load_config()
    except ValueError as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(2)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mexd {version_metadata()['describe']}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    MEXD token ledger CLI.

    Configuration comes from MEXD_* environment variables (see `mexd info`).
    """


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------


@app.command()
def info(
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Show the resolved configuration and the token that `replay` would deploy."""
    cfg = _load_cfg()
    if json_output:
        payload = cfg.to_dict()
        payload["version"] = __version__
        payload["methods"] = Token.methods()
        typer.echo(_pretty(payload))
        return

    t = cfg.token
    typer.echo(summary(cfg))
    typer.echo("-" * 60)
    typer.echo(f"Name:         {t.name}")
    typer.echo(f"Symbol:       {t.symbol}")
    typer.echo(f"Decimals:     {t.decimals}")
    typer.echo(f"Total supply: {t.total_supply}")
    typer.echo(f"Strict u256:  {t.strict_u256}")
    typer.echo(f"Version:      {__version__}")


# ---------------------------------------------------------------------------
# replay
# ---------------------------------------------------------------------------


def _resolve(value: Any, aliases: Dict[str, bytes]) -> Any:
    if isinstance(value, str) and value.startswith("@"):
        tag = value[1:]
        if not tag:
            raise ScriptError("empty account alias '@'")
        if tag not in aliases:
            aliases[tag] = derive_address(tag)
        return aliases[tag]
    return value


def _parse_script(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise ScriptError("script must be a JSON object")
    calls = raw.get("calls")
    if not isinstance(calls, list):
        raise ScriptError("script.calls must be a list")
    for i, c in enumerate(calls):
        if not isinstance(c, dict) or not isinstance(c.get("method"), str):
            raise ScriptError(f"calls[{i}] must be an object with a string 'method'")
        if not isinstance(c.get("args", []), list):
            raise ScriptError(f"calls[{i}].args must be a list")
    return raw


def _run_call(token: Token, idx: int, call: Dict[str, Any], aliases: Dict[str, bytes]) -> Dict[str, Any]:
    method = call["method"]
    caller = _resolve(call.get("caller"), aliases)
    args = [_resolve(a, aliases) for a in call.get("args", [])]
    out: Dict[str, Any] = {"index": idx, "method": method}
    with mlog.trace_scope():
        mlog.bind(method=method, caller=caller)
        try:
            result = token.call(method, caller, *args)
        except LedgerError as e:
            out.update(error_to_receipt_fields(e))
            return out
        except TypeError as e:
            raise ScriptError(f"calls[{idx}] ({method}): {e}") from None

    if isinstance(result, Receipt):
        out.update(result.to_dict())
        out["method"] = method
    else:
        out.update({"status": "SUCCESS", "result": _hexify(result)})
    return out


def _final_state(token: Token) -> Dict[str, Any]:
    return {
        "owner": to_hex(token.get_owner()),
        "gateState": token.gate_state.value,
        "totalSupply": token.total_supply(),
        "balances": {to_hex(a): v for a, v in sorted(token.ledger.balances().items())},
        "allowances": [
            {"owner": to_hex(o), "spender": to_hex(s), "value": v}
            for (o, s), v in sorted(token.ledger.allowances().items())
        ],
    }


def _echo_text(receipts: List[Dict[str, Any]], state: Dict[str, Any]) -> None:
    for r in receipts:
        if r["status"] == "SUCCESS":
            line = f"[{r['index']}] {r['method']}: SUCCESS"
            if r.get("result") is not None:
                line += f" -> {r['result']}"
            typer.echo(line)
            for ev in r.get("events", []):
                args = ", ".join(f"{k}={v}" for k, v in ev["args"].items())
                typer.echo(f"      {ev['event']}({args})")
        else:
            err = r["error"]
            typer.echo(f"[{r['index']}] {r['method']}: REVERT {err['kind']} ({err['message']})")
    typer.echo("-" * 60)
    typer.echo(f"Owner:        {state['owner']} ({state['gateState']})")
    typer.echo(f"Total supply: {state['totalSupply']}")
    typer.echo("Balances:")
    for addr, bal in state["balances"].items():
        typer.echo(f"  {addr}  {bal}")
    if state["allowances"]:
        typer.echo("Allowances:")
        for a in state["allowances"]:
            typer.echo(f"  {a['owner']} -> {a['spender']}  {a['value']}")


@app.command()
def replay(
    script: Path = typer.Argument(..., help="JSON call script"),
    creator: Optional[str] = typer.Option(
        None, "--creator", help="Deploying account (0x-hex or @name)"
    ),
    json_output: bool = typer.Option(True, "--json/--text", help="Output format"),
    stop_on_error: bool = typer.Option(
        False, "--stop-on-error", help="Stop at the first reverted call (exit 1)"
    ),
) -> None:
    """Deploy a fresh token and apply every call in SCRIPT in order."""
    cfg = _load_cfg()
    mlog.configure_from_config(cfg)

    try:
        raw = json.loads(script.read_text(encoding="utf-8"))
        doc = _parse_script(raw)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: cannot load script {script}: {e}", err=True)
        raise typer.Exit(2)

    aliases: Dict[str, bytes] = {}
    try:
        creator_addr = to_address(
            _resolve(creator or doc.get("creator") or "@creator", aliases)
        )
    except (LedgerError, ScriptError) as e:
        typer.echo(f"Error: invalid creator: {e}", err=True)
        raise typer.Exit(2)
    aliases.setdefault("creator", creator_addr)

    token = Token.deploy(creator_addr, config=cfg)
    receipts: List[Dict[str, Any]] = []
    failed = False
    for idx, call in enumerate(doc["calls"]):
        try:
            r = _run_call(token, idx, call, aliases)
        except ScriptError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(2)
        receipts.append(r)
        if r["status"] != "SUCCESS" and stop_on_error:
            failed = True
            break

    log.info(
        "replay finished",
        extra={
            "calls": len(receipts),
            "reverted": sum(1 for r in receipts if r["status"] != "SUCCESS"),
        },
    )
    state = _final_state(token)
    if json_output:
        typer.echo(
            _pretty(
                {
                    "token": token.metadata.to_dict(),
                    "creator": to_hex(creator_addr),
                    "receipts": receipts,
                    "state": state,
                }
            )
        )
    else:
        _echo_text(receipts, state)

    if failed:
        raise typer.Exit(1)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
