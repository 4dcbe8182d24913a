# -*- coding: utf-8 -*-
"""
Property tests for the ledger and the access gate.

Laws checked over random call sequences:
- sum(balances) == total supply after every call (successful or not)
- balances and allowances stay in [0, 2**256 - 1]
- a rejected call leaves state byte-for-byte unchanged
- every successful call returns a Receipt whose events describe the new state
- approve is last-wins; increase then decrease by the same amount is identity
- ownership is a two-state machine; Ownerless never leaves Ownerless
"""
from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from mexd.access.ownable import AccessGate, GateState
from mexd.address import ZERO_ADDRESS
from mexd.errors import LedgerError, NotOwner
from mexd.math import U256_MAX
from mexd.token.ledger import Ledger
from tests.property import ACCOUNTS, SUPPLY, accounts, amounts, ops_lists


def _fresh() -> Ledger:
    return Ledger(ACCOUNTS[0], SUPPLY)


def _apply(led: Ledger, op):
    method, *args = op
    return getattr(led, method)(*args)


@given(ops_lists())
def test_supply_conserved_and_failures_are_atomic(ops):
    led = _fresh()
    for op in ops:
        before = led.snapshot()
        try:
            receipt = _apply(led, op)
        except LedgerError:
            after = led.snapshot()
            assert after.balances == before.balances
            assert after.allowances == before.allowances
        else:
            assert receipt.result is True
            assert receipt.events
        assert led.supply_is_conserved()
        assert led.total_supply() == SUPPLY


@given(ops_lists())
def test_values_stay_in_u256_and_zero_entries_are_dropped(ops):
    led = _fresh()
    for op in ops:
        try:
            _apply(led, op)
        except LedgerError:
            pass
    for v in list(led.balances().values()) + list(led.allowances().values()):
        assert 0 < v <= U256_MAX


@given(ops_lists())
def test_last_event_matches_resulting_allowance(ops):
    led = _fresh()
    for op in ops:
        try:
            receipt = _apply(led, op)
        except LedgerError:
            continue
        for ev in receipt.events:
            if ev.name == "Approval":
                assert led.allowance(ev["owner"], ev["spender"]) == ev["value"]


@given(accounts(), accounts(), amounts(), amounts())
def test_approve_is_last_wins(owner, spender, a, b):
    led = _fresh()
    led.approve(owner, spender, a)
    led.approve(owner, spender, b)
    assert led.allowance(owner, spender) == b


@given(accounts(), accounts(), st.integers(min_value=0, max_value=10**30), st.integers(min_value=0, max_value=10**30))
def test_increase_then_decrease_is_identity(owner, spender, start, delta):
    led = _fresh()
    led.approve(owner, spender, start)
    led.increase_allowance(owner, spender, delta)
    led.decrease_allowance(owner, spender, delta)
    assert led.allowance(owner, spender) == start


@given(accounts(), accounts(), st.integers(min_value=0, max_value=SUPPLY))
def test_transfer_moves_exactly_amount(sender, recipient, amount):
    led = _fresh()
    led.transfer(ACCOUNTS[0], sender, SUPPLY)
    led.transfer(sender, recipient, amount)
    if sender == recipient:
        assert led.balance_of(sender) == SUPPLY
    else:
        assert led.balance_of(sender) == SUPPLY - amount
        assert led.balance_of(recipient) == amount


@given(st.lists(st.tuples(st.sampled_from(("transfer", "renounce")), accounts(), accounts()), max_size=20))
def test_gate_is_a_two_state_machine(steps):
    gate = AccessGate(ACCOUNTS[0])
    renounced = False
    for kind, caller, target in steps:
        owner_before = gate.current_owner()
        try:
            if kind == "transfer":
                gate.transfer_ownership(caller, target)
            else:
                gate.renounce_ownership(caller)
        except NotOwner:
            assert renounced or caller != owner_before
            assert gate.current_owner() == owner_before
            continue
        assert not renounced
        assert caller == owner_before
        if kind == "renounce":
            renounced = True
            assert gate.current_owner() == ZERO_ADDRESS
        else:
            assert gate.current_owner() == target
    assert (gate.state is GateState.OWNERLESS) == renounced


@pytest.mark.parametrize("amount", [0, 1, SUPPLY])
def test_full_delegated_spend_clears_allowance(amount):
    owner, spender, to = ACCOUNTS[0], ACCOUNTS[1], ACCOUNTS[2]
    led = _fresh()
    led.approve(owner, spender, amount)
    led.transfer_from(spender, owner, to, amount)
    assert led.allowance(owner, spender) == 0
    assert (owner, spender) not in led.allowances()
