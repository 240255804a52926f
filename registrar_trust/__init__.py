"""
registrar-trust - Trust-chain verification for registrar change requests

Every record held by the registrar (domains, hosts, contacts, approvers and
approver sets) changes only through a change request whose final approval
is signed. This package proves that the live state of a record is exactly
what was signed, and that the signer chains back to a pinned trust anchor.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
