"""Verification result DTOs.

Every verification returns an explicit ``verified`` flag and the errors
collected on the way. Callers must check the flag; a verified result may
still carry tolerated errors (for example approvers of a set that failed
to verify while others succeeded).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from registrar_trust.application.dtos.attestation import ApprovalAttestation
from registrar_trust.domain.exceptions import RegistrarTrustError

if TYPE_CHECKING:
    from registrar_trust.application.services.key_sets import VerifiedApproverSet

ExportT = TypeVar("ExportT")


@dataclass(frozen=True)
class ChangeRequestVerification:
    """Outcome of verifying a change request's final approval.

    Attributes:
        verified: True if the approval chains to a trust anchor and approves.
        errors: Errors collected during verification.
        signed_payload: Raw JSON of the export the approver signed.
        attestation: The decoded attestation, when one was recovered.
    """

    verified: bool
    errors: tuple[RegistrarTrustError, ...] = field(default_factory=tuple)
    signed_payload: bytes = b""
    attestation: ApprovalAttestation | None = None


@dataclass(frozen=True)
class ApproverSetVerification:
    """Outcome of verifying an approver-set revision.

    Attributes:
        verified: True if the revision is signed and at least one member verified.
        verified_set: The verified members as a key set, when verified.
        errors: Errors collected, including tolerated member failures.
    """

    verified: bool
    verified_set: VerifiedApproverSet | None = None
    errors: tuple[RegistrarTrustError, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ObjectVerification(Generic[ExportT]):
    """Outcome of verifying an object's current revision.

    Attributes:
        verified: True if the live revision equals the signed one.
        errors: Errors collected during verification.
        obj: The object that was verified, present only when verified.
    """

    verified: bool
    errors: tuple[RegistrarTrustError, ...] = field(default_factory=tuple)
    obj: ExportT | None = None
