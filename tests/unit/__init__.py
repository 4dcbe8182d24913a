"""
tests.unit
==========

Small shared helpers for unit-test modules:

    from tests.unit import FIXTURES, read_json_fixture, event_names

Fixtures (e.g. replay scripts for the CLI) live under `tests/fixtures/`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

# tests/unit/__init__.py -> tests -> <root>
ROOT: Path = Path(__file__).resolve().parents[2]
FIXTURES: Path = ROOT / "tests" / "fixtures"

__all__ = ["ROOT", "FIXTURES", "read_json_fixture", "event_names"]


def read_json_fixture(relpath: str) -> Any:
    """Load `tests/fixtures/<relpath>` as JSON."""
    with open(FIXTURES / relpath, "r", encoding="utf-8") as f:
        return json.load(f)


def event_names(receipt: Any) -> List[str]:
    """Names of the events on a Receipt, in emission order."""
    return [e.name for e in receipt.events]
