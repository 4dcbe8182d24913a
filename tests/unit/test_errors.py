# -*- coding: utf-8 -*-
from __future__ import annotations

import json

import pytest

from mexd import errors
from mexd.errors import (ERROR_KINDS, InsufficientBalance, LedgerError, NotOwner,
                         error_to_receipt_fields)


def test_every_kind_is_a_ledger_error_with_unique_code():
    assert len(ERROR_KINDS) == 11
    for code, cls in ERROR_KINDS.items():
        assert issubclass(cls, LedgerError)
        e = cls()
        assert e.code == code
        assert e.message == cls.REASON
        assert e.kind == cls.__name__


@pytest.mark.parametrize(
    "cls, reason",
    [
        (errors.InsufficientBalance, "ERC20: transfer amount exceeds balance"),
        (errors.InvalidRecipient, "ERC20: transfer to the zero address"),
        (errors.InvalidSpender, "ERC20: approve to the zero address"),
        (errors.AllowanceUnderflow, "ERC20: decreased allowance below zero"),
        (errors.NotOwner, "Ownable: caller is not the owner"),
    ],
)
def test_reason_strings_are_stable(cls, reason):
    assert cls().reason == reason


def test_message_override_keeps_code():
    e = errors.InvalidSpender("custom", data={"owner": "0xab"})
    assert e.code == "INVALID_SPENDER"
    assert e.message == "custom"
    assert str(e) == "INVALID_SPENDER: custom ({'owner': '0xab'})"


def test_to_dict_and_receipt_fields_are_json_safe():
    e = InsufficientBalance(data={"balance": 0, "amount": 1})
    fields = error_to_receipt_fields(e)
    assert fields["status"] == "REVERT"
    assert fields["error"] == {
        "code": "INSUFFICIENT_BALANCE",
        "kind": "InsufficientBalance",
        "message": "ERC20: transfer amount exceeds balance",
        "data": {"balance": 0, "amount": 1},
    }
    json.dumps(fields)


def test_errors_are_raisable_and_catchable_as_base():
    with pytest.raises(LedgerError):
        raise NotOwner()
    assert "data" not in NotOwner().to_dict()
