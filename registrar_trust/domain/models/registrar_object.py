"""Registrar object kinds and approval actions.

The string values are the ones used by the registrar's export format and
API paths (e.g. /api/view/approverset/12), so they must not change.
"""

from __future__ import annotations

from enum import Enum


class ObjectType(str, Enum):
    """Kinds of registrar objects the verifier can fetch."""

    DOMAIN = "domain"
    HOST = "host"
    CONTACT = "contact"
    APPROVER = "approver"
    APPROVER_SET = "approverset"
    CHANGE_REQUEST = "changerequest"
    APPROVAL = "approval"

    @property
    def display_name(self) -> str:
        """Human-readable name used in error messages."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[ObjectType, str] = {
    ObjectType.DOMAIN: "Domain",
    ObjectType.HOST: "Host",
    ObjectType.CONTACT: "Contact",
    ObjectType.APPROVER: "Approver",
    ObjectType.APPROVER_SET: "Approver Set",
    ObjectType.CHANGE_REQUEST: "Change Request",
    ObjectType.APPROVAL: "Approval",
}

# Kinds that carry revisions authorized by change requests
VERIFIABLE_OBJECT_TYPES: frozenset[ObjectType] = frozenset(
    {
        ObjectType.DOMAIN,
        ObjectType.HOST,
        ObjectType.CONTACT,
        ObjectType.APPROVER,
        ObjectType.APPROVER_SET,
    }
)


class ApprovalAction(str, Enum):
    """Decision recorded inside a signed approval attestation."""

    APPROVED = "approve"
    DECLINED = "decline"
