# -*- coding: utf-8 -*-
"""
mexd.access
===========

Single-owner access control for privileged token operations.
"""

from .ownable import AccessGate, GateState

__all__ = ["AccessGate", "GateState"]
