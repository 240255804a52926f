"""Consistency errors (tamper and drift detection).

These are the most important failures the engine reports: the live
state of an object does not match what was cryptographically signed.
"""

from __future__ import annotations

from registrar_trust.domain.exceptions import RegistrarTrustError


class ConsistencyError(RegistrarTrustError):
    """Base class for consistency errors."""

    pass


class RevisionMismatchError(ConsistencyError):
    """A field of the live revision differs from the signed revision.

    Attributes:
        field_name: Export field that did not match.
    """

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"the {field_name} fields did not match")


class NoVerifiedApproversError(ConsistencyError):
    """None of the approver set's declared members could be verified."""

    def __init__(self, approver_set_id: int, at_time: int) -> None:
        self.approver_set_id = approver_set_id
        self.at_time = at_time
        super().__init__(
            f"No verified approvers found for approver set {approver_set_id} "
            f"at time {at_time}"
        )
