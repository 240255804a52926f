"""Application DTOs - Export documents, attestations and verification results."""

from registrar_trust.application.dtos.attestation import (
    ApprovalAttestation,
    decode_attestation,
    encode_attestation,
)
from registrar_trust.application.dtos.exports import (
    EXPORT_MODELS,
    ApprovalExport,
    ApproverExportFull,
    ApproverSetExportFull,
    ChangeRequestExport,
    ContactExport,
    DomainExport,
    HostExport,
    RegistrarObjectExport,
    decode_export,
)
from registrar_trust.application.dtos.verification import (
    ApproverSetVerification,
    ChangeRequestVerification,
    ObjectVerification,
)

__all__: list[str] = [
    "EXPORT_MODELS",
    "ApprovalAttestation",
    "ApprovalExport",
    "ApproverExportFull",
    "ApproverSetExportFull",
    "ApproverSetVerification",
    "ChangeRequestExport",
    "ChangeRequestVerification",
    "ContactExport",
    "DomainExport",
    "HostExport",
    "ObjectVerification",
    "RegistrarObjectExport",
    "decode_attestation",
    "decode_export",
    "encode_attestation",
]
