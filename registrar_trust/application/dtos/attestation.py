"""Approval attestation codec.

An attestation is the JSON document an approver downloads, signs and
uploads again. It names the decision, the kind of object it concerns, and
embeds the full export of the object as it looked when the approver
reviewed it. ``export_rev`` is kept as raw JSON bytes because its model
depends on ``object_type``; callers decode it with ``decode_export`` once
the kind has been checked.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from registrar_trust.application.dtos.exports import SignatureBytes, none_as_empty
from registrar_trust.domain.errors.content import AttestationDecodeError
from registrar_trust.domain.models.registrar_object import ApprovalAction


class ApprovalAttestation(BaseModel):
    """Decoded contents of a signed approval."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    approval_id: int = Field(0, alias="ApprovalID")
    export_rev: bytes = Field(b"", alias="ExportRev")
    username: str = Field("", alias="Username")
    action: str = Field("", alias="Action")
    object_type: str = Field("", alias="ObjectType")
    signatures: Annotated[
        tuple[SignatureBytes, ...], BeforeValidator(none_as_empty)
    ] = Field((), alias="Signature")

    @property
    def is_approved(self) -> bool:
        return self.action == ApprovalAction.APPROVED.value


def decode_attestation(payload: bytes) -> ApprovalAttestation:
    """Decode a signed payload into an attestation.

    Args:
        payload: Bytes recovered from a verified clearsigned blob.

    Returns:
        The decoded attestation. ``export_rev`` holds the compact JSON of
        the embedded export.

    Raises:
        AttestationDecodeError: If the payload is not an attestation.
    """
    try:
        document = json.loads(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise AttestationDecodeError(f"Signed payload is not JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise AttestationDecodeError("Signed payload is not a JSON object")

    export_rev = document.get("ExportRev")
    if not isinstance(export_rev, dict):
        raise AttestationDecodeError("Signed payload carries no ExportRev object")
    document["ExportRev"] = json.dumps(export_rev, separators=(",", ":")).encode()

    try:
        return ApprovalAttestation.model_validate(document)
    except ValidationError as exc:
        raise AttestationDecodeError(
            f"Signed payload is not a valid attestation: {exc.error_count()} error(s)"
        ) from exc


def encode_attestation(
    approval_id: int,
    action: ApprovalAction,
    object_type: str,
    export_rev: BaseModel | dict[str, Any],
    username: str = "",
) -> bytes:
    """Build the attestation document an approver signs.

    Args:
        approval_id: Approval the decision is rendered for.
        action: Approve or decline.
        object_type: Registrar object type of the change request.
        export_rev: Full export of the object under review.
        username: Approver username recorded in the document.

    Returns:
        Indented JSON bytes, ready to be clearsigned.
    """
    if approval_id <= 0:
        raise ValueError("unable to export an attestation that has no approval id")

    if isinstance(export_rev, BaseModel):
        export_document = export_rev.model_dump(by_alias=True, mode="json")
    else:
        export_document = export_rev

    document = {
        "ApprovalID": approval_id,
        "ExportRev": export_document,
        "Username": username,
        "Action": action.value,
        "ObjectType": object_type,
        "Signature": None,
    }
    return json.dumps(document, indent=2).encode()
