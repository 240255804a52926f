"""Test helpers for registrar-trust tests.

This package contains reusable builders for signed registrar histories.

Helpers:
    RegistrarWorld: Builds approvers, approver sets and objects whose
        change requests are clearsigned with real OpenPGP keys
    Approver: A stored approver together with its private key

Usage:
    from tests.helpers import RegistrarWorld
"""

from tests.helpers.registrar_world import GENESIS, Approver, RegistrarWorld

__all__ = ["GENESIS", "Approver", "RegistrarWorld"]
