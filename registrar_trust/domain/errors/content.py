"""Signed content errors.

Raised once a signature has been accepted but the content it carries
cannot be used: undecodable payloads, declined approvals, or approvals
for a different kind of object.
"""

from __future__ import annotations

from registrar_trust.domain.exceptions import RegistrarTrustError


class ContentError(RegistrarTrustError):
    """Base class for signed content errors."""

    pass


class AttestationDecodeError(ContentError):
    """The signed payload is not a valid approval attestation."""

    pass


class ExportDecodeError(ContentError):
    """An export document could not be decoded into its model."""

    pass


class ChangeRequestNotApprovedError(ContentError):
    """The final approval declined the change request."""

    def __init__(self, change_request_id: int, action: str) -> None:
        self.change_request_id = change_request_id
        self.action = action
        super().__init__(
            f"Change request {change_request_id} was not approved (action={action})"
        )


class ObjectTypeMismatchError(ContentError):
    """The attestation endorses a different kind of object."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Approval is for a {actual}, expected a {expected}"
        )
