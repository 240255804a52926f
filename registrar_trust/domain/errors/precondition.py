"""Structural precondition errors.

These are terminal for a verification call: the object or change request
is missing a piece that verification cannot proceed without.
"""

from __future__ import annotations

from registrar_trust.domain.exceptions import RegistrarTrustError


class PreconditionError(RegistrarTrustError):
    """Base class for missing-structure failures."""

    pass


class NoCurrentRevisionError(PreconditionError):
    """The object has no current revision (ID <= 0)."""

    def __init__(self, object_type: str, object_id: int) -> None:
        self.object_type = object_type
        self.object_id = object_id
        super().__init__(
            f"No current revision found for {object_type} {object_id}"
        )


class NoChangeRequestError(PreconditionError):
    """The current revision was never authorized by a change request."""

    def __init__(self, object_type: str, revision_id: int) -> None:
        self.object_type = object_type
        self.revision_id = revision_id
        super().__init__(
            f"Unable to find a change request for {object_type} revision {revision_id}"
        )


class InvalidChangeRequestIDError(PreconditionError):
    """A change request id <= 0 was supplied."""

    def __init__(self, change_request_id: int) -> None:
        self.change_request_id = change_request_id
        super().__init__(f"Invalid change request ID {change_request_id}")


class NoFinalApprovalError(PreconditionError):
    """The change request carries no approval flagged as final."""

    def __init__(self, change_request_id: int) -> None:
        self.change_request_id = change_request_id
        super().__init__(
            f"Change request {change_request_id} has no final approval"
        )
