"""Registrar export models.

Pydantic models for the export documents the registrar publishes for each
object and revision. Field aliases follow the registrar's JSON format
exactly (including its historical spellings such as ``Owner``,
``SaveNotes`` and ``IssuerCR``) so that documents recovered from signed
approvals and documents fetched from the object store decode the same way.

Structural equality:
    Each revision export implements ``compare_export``, the tamper-evidence
    primitive of the verifier. Every semantically meaningful field must
    match. Administrative bookkeeping is ignored: ``RevisionState``,
    ``CreatedAt``/``CreatedBy``, the authorizing ``ChangeRequestID`` (it is
    assigned after the approver signs) and internal row ids of embedded
    value rows (host addresses, DS data). References to other registrar
    objects compare as unordered collections of object ids.

Usage:
    export = DomainExport.model_validate_json(raw)
    same, mismatches = live.current_revision.compare_export(export.pending_revision)
"""

from __future__ import annotations

import base64
import binascii
from collections import Counter
from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationError,
)

from registrar_trust.domain.errors.consistency import RevisionMismatchError
from registrar_trust.domain.errors.content import ExportDecodeError
from registrar_trust.domain.models.registrar_object import ObjectType

# Go's zero time.Time, which the registrar emits for unset timestamps
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def none_as_empty(value: Any) -> Any:
    """Go encodes nil slices as null."""
    return () if value is None else value


def _decode_base64(value: Any) -> Any:
    """Go encodes []byte as base64 text."""
    if value is None:
        return b""
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise ValueError("value is not valid base64") from exc
    return value


SignatureBytes = Annotated[
    bytes,
    BeforeValidator(_decode_base64),
    PlainSerializer(
        lambda v: base64.b64encode(v).decode("ascii"),
        return_type=str,
        when_used="json",
    ),
]


class ExportModel(BaseModel):
    """Base for all registrar export documents."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


# Short references -----------------------------------------------------------


class ApproverSetExportShort(ExportModel):
    """Reference to an approver set without revision detail."""

    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    created_at: datetime = Field(ZERO_TIME, alias="CreatedAt")
    created_by: str = Field("", alias="CreatedBy")


class ApproverExportShort(ExportModel):
    """Reference to an approver without revision detail."""

    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    created_at: datetime = Field(ZERO_TIME, alias="CreatedAt")
    created_by: str = Field("", alias="CreatedBy")


class ContactExportShort(ExportModel):
    """Reference to a contact."""

    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    name: str = Field("", alias="Name")
    contact_registry_id: str = Field("", alias="ContactRegistryID")
    contact_roid: str = Field("", alias="ContactROID")


class HostExportShort(ExportModel):
    """Reference to a host."""

    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    host_name: str = Field("", alias="HostName")
    host_roid: str = Field("", alias="HostROID")


class HostAddress(ExportModel):
    """One glue address of a host revision."""

    id: int = Field(0, alias="ID")
    host_revision_id: int = Field(0, alias="HostRevisionID")
    ip_address: str = Field("", alias="IPAddress")
    protocol: int = Field(0, alias="Protocol")

    def content_key(self) -> tuple[str, int]:
        return (self.ip_address, self.protocol)


class DSDataEntry(ExportModel):
    """One DS record of a domain revision."""

    id: int = Field(0, alias="ID")
    domain_revision_id: int = Field(0, alias="DomainRevisionID")
    key_tag: int = Field(0, alias="KeyTag")
    algorithm: int = Field(0, alias="Algorithm")
    digest_type: int = Field(0, alias="DigestType")
    digest: str = Field("", alias="Digest")

    def content_key(self) -> tuple[int, int, int, str]:
        return (self.key_tag, self.algorithm, self.digest_type, self.digest.upper())


ApproverSetRefs = Annotated[
    tuple[ApproverSetExportShort, ...], BeforeValidator(none_as_empty)
]
ApproverRefs = Annotated[
    tuple[ApproverExportShort, ...], BeforeValidator(none_as_empty)
]
HostRefs = Annotated[tuple[HostExportShort, ...], BeforeValidator(none_as_empty)]
HostAddresses = Annotated[tuple[HostAddress, ...], BeforeValidator(none_as_empty)]
DSDataEntries = Annotated[tuple[DSDataEntry, ...], BeforeValidator(none_as_empty)]


def _same_ids(left: tuple[Any, ...], right: tuple[Any, ...]) -> bool:
    return Counter(ref.id for ref in left) == Counter(ref.id for ref in right)


def _same_contents(left: tuple[Any, ...], right: tuple[Any, ...]) -> bool:
    return Counter(row.content_key() for row in left) == Counter(
        row.content_key() for row in right
    )


# Revisions ------------------------------------------------------------------


class RevisionExport(ExportModel):
    """Fields shared by every revision export.

    Subclasses list the scalar fields that take part in structural
    equality in ``compared_fields`` as (attribute, label) pairs, and their
    embedded collections in ``compared_refs`` (compared by object id) and
    ``compared_values`` (compared by content).
    """

    object_type: ClassVar[ObjectType]
    compared_fields: ClassVar[tuple[tuple[str, str], ...]] = ()
    compared_refs: ClassVar[tuple[tuple[str, str], ...]] = (
        ("required_approver_sets", "required approver sets"),
        ("informed_approver_sets", "informed approver sets"),
    )
    compared_values: ClassVar[tuple[tuple[str, str], ...]] = ()

    id: int = Field(0, alias="ID")
    revision_state: str = Field("", alias="RevisionState")
    desired_state: str = Field("", alias="DesiredState")
    saved_notes: str = Field("", alias="SavedNotes")
    change_request_id: int = Field(0, alias="ChangeRequestID")
    issue_cr: str = Field("", alias="IssueCR")
    notes: str = Field("", alias="Notes")
    required_approver_sets: ApproverSetRefs = Field((), alias="RequiredApproverSets")
    informed_approver_sets: ApproverSetRefs = Field((), alias="InformedApproverSets")
    created_at: datetime = Field(ZERO_TIME, alias="CreatedAt")
    created_by: str = Field("", alias="CreatedBy")

    def compare_export(
        self, other: RevisionExport
    ) -> tuple[bool, list[RevisionMismatchError]]:
        """Structurally compare this revision with another of the same kind.

        All differences are collected; the caller decides whether to stop.

        Args:
            other: The revision to compare against.

        Returns:
            Tuple of (is_same, mismatches).

        Raises:
            TypeError: If other is a different kind of revision.
        """
        if type(other) is not type(self):
            raise TypeError(
                f"cannot compare {type(self).__name__} with {type(other).__name__}"
            )

        mismatches: list[RevisionMismatchError] = []
        for attribute, label in self.compared_fields:
            if getattr(self, attribute) != getattr(other, attribute):
                mismatches.append(RevisionMismatchError(label))
        for attribute, label in self.compared_refs:
            if not _same_ids(getattr(self, attribute), getattr(other, attribute)):
                mismatches.append(RevisionMismatchError(label))
        for attribute, label in self.compared_values:
            if not _same_contents(getattr(self, attribute), getattr(other, attribute)):
                mismatches.append(RevisionMismatchError(label))
        return not mismatches, mismatches


_STATUS_FLAGS: tuple[tuple[str, str], ...] = (
    ("client_delete_prohibited_status", "ClientDeleteProhibitedStatus"),
    ("server_delete_prohibited_status", "ServerDeleteProhibitedStatus"),
    ("client_transfer_prohibited_status", "ClientTransferProhibitedStatus"),
    ("server_transfer_prohibited_status", "ServerTransferProhibitedStatus"),
    ("client_update_prohibited_status", "ClientUpdateProhibitedStatus"),
    ("server_update_prohibited_status", "ServerUpdateProhibitedStatus"),
)

_NOTES_FIELDS: tuple[tuple[str, str], ...] = (
    ("saved_notes", "SavedNotes"),
    ("issue_cr", "IssueCR"),
    ("notes", "Notes"),
)


class EPPStatusRevisionExport(RevisionExport):
    """Revision of an object that carries the EPP prohibited-status flags."""

    client_delete_prohibited_status: bool = Field(
        False, alias="ClientDeleteProhibitedStatus"
    )
    server_delete_prohibited_status: bool = Field(
        False, alias="ServerDeleteProhibitedStatus"
    )
    client_transfer_prohibited_status: bool = Field(
        False, alias="ClientTransferProhibitedStatus"
    )
    server_transfer_prohibited_status: bool = Field(
        False, alias="ServerTransferProhibitedStatus"
    )
    client_update_prohibited_status: bool = Field(
        False, alias="ClientUpdateProhibitedStatus"
    )
    server_update_prohibited_status: bool = Field(
        False, alias="ServerUpdateProhibitedStatus"
    )


class DomainRevisionExport(EPPStatusRevisionExport):
    """One revision of a domain."""

    object_type: ClassVar[ObjectType] = ObjectType.DOMAIN
    compared_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("id", "ID"),
        ("domain_id", "DomainID"),
        ("desired_state", "DesiredState"),
        ("owners", "Owners"),
        ("class_", "Class"),
        ("registrant_id", "DomainRegistrantID"),
        ("admin_contact_id", "DomainAdminContactID"),
        ("tech_contact_id", "DomainTechContactID"),
        ("billing_contact_id", "DomainBillingContactID"),
        *_STATUS_FLAGS,
        ("client_renew_prohibited_status", "ClientRenewProhibitedStatus"),
        ("server_renew_prohibited_status", "ServerRenewProhibitedStatus"),
        ("client_hold_status", "ClientHoldStatus"),
        ("server_hold_status", "ServerHoldStatus"),
        *_NOTES_FIELDS,
    )
    compared_refs: ClassVar[tuple[tuple[str, str], ...]] = (
        ("hostnames", "hostnames"),
        *RevisionExport.compared_refs,
    )
    compared_values: ClassVar[tuple[tuple[str, str], ...]] = (
        ("ds_data_entries", "DS data entries"),
    )

    domain_id: int = Field(0, alias="DomainID")
    owners: str = Field("", alias="Owner")
    class_: str = Field("", alias="Class")

    client_hold_status: bool = Field(False, alias="ClientHoldStatus")
    server_hold_status: bool = Field(False, alias="ServerHoldStatus")
    client_renew_prohibited_status: bool = Field(
        False, alias="ClientRenewProhibitedStatus"
    )
    server_renew_prohibited_status: bool = Field(
        False, alias="ServerRenewProhibitedStatus"
    )

    domain_registrant: ContactExportShort = Field(
        default_factory=ContactExportShort, alias="DomainRegistrant"
    )
    domain_admin_contact: ContactExportShort = Field(
        default_factory=ContactExportShort, alias="DomainAdminContact"
    )
    domain_tech_contact: ContactExportShort = Field(
        default_factory=ContactExportShort, alias="DomainTechContact"
    )
    domain_billing_contact: ContactExportShort = Field(
        default_factory=ContactExportShort, alias="DomainBillingContact"
    )
    hostnames: HostRefs = Field((), alias="Hostnames")
    ds_data_entries: DSDataEntries = Field((), alias="DSDataEntries")

    @property
    def registrant_id(self) -> int:
        return self.domain_registrant.id

    @property
    def admin_contact_id(self) -> int:
        return self.domain_admin_contact.id

    @property
    def tech_contact_id(self) -> int:
        return self.domain_tech_contact.id

    @property
    def billing_contact_id(self) -> int:
        return self.domain_billing_contact.id


class HostRevisionExport(EPPStatusRevisionExport):
    """One revision of a host."""

    object_type: ClassVar[ObjectType] = ObjectType.HOST
    compared_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("id", "ID"),
        ("host_id", "HostID"),
        ("desired_state", "DesiredState"),
        *_STATUS_FLAGS,
        *_NOTES_FIELDS,
    )
    compared_values: ClassVar[tuple[tuple[str, str], ...]] = (
        ("host_addresses", "host addresses"),
    )

    host_id: int = Field(0, alias="HostID")

    host_addresses: HostAddresses = Field((), alias="HostAddresses")


class ContactRevisionExport(EPPStatusRevisionExport):
    """One revision of a contact."""

    object_type: ClassVar[ObjectType] = ObjectType.CONTACT
    compared_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("id", "ID"),
        ("contact_id", "ContactID"),
        ("desired_state", "DesiredState"),
        *_STATUS_FLAGS,
        ("name", "Name"),
        ("org", "Org"),
        ("address_street1", "AddressStreet1"),
        ("address_street2", "AddressStreet2"),
        ("address_street3", "AddressStreet3"),
        ("address_city", "AddressCity"),
        ("address_state", "AddressState"),
        ("address_postal_code", "AddressPostalCode"),
        ("address_country", "AddressCountry"),
        ("voice_phone_number", "VoicePhoneNumber"),
        ("voice_phone_extension", "VoicePhoneExtension"),
        ("fax_phone_number", "FaxPhoneNumber"),
        ("fax_phone_extension", "FaxPhoneExtension"),
        ("email_address", "EmailAddress"),
        *_NOTES_FIELDS,
    )

    contact_id: int = Field(0, alias="ContactID")
    # The registrar has always exported these two under these keys
    saved_notes: str = Field("", alias="SaveNotes")
    issue_cr: str = Field("", alias="IssuerCR")

    name: str = Field("", alias="Name")
    org: str = Field("", alias="Org")
    address_street1: str = Field("", alias="AddressStreet1")
    address_street2: str = Field("", alias="AddressStreet2")
    address_street3: str = Field("", alias="AddressStreet3")
    address_city: str = Field("", alias="AddressCity")
    address_state: str = Field("", alias="AddressState")
    address_postal_code: str = Field("", alias="AddressPostalCode")
    address_country: str = Field("", alias="AddressCountry")
    voice_phone_number: str = Field("", alias="VoicePhoneNumber")
    voice_phone_extension: str = Field("", alias="VoicePhoneExtension")
    fax_phone_number: str = Field("", alias="FaxPhoneNumber")
    fax_phone_extension: str = Field("", alias="FaxPhoneExtension")
    email_address: str = Field("", alias="EmailAddress")


class ApproverRevisionExport(RevisionExport):
    """One revision of an approver, including the signing public key."""

    object_type: ClassVar[ObjectType] = ObjectType.APPROVER
    compared_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("id", "ID"),
        ("approver_id", "ApproverID"),
        ("desired_state", "DesiredState"),
        ("name", "Name"),
        ("email_address", "EmailAddress"),
        ("role", "Role"),
        ("username", "Username"),
        ("employee_id", "EmployeeID"),
        ("department", "Department"),
        ("is_admin", "IsAdmin"),
        ("fingerprint", "Fingerprint"),
        ("public_key", "PublicKey"),
        *_NOTES_FIELDS,
    )

    approver_id: int = Field(0, alias="ApproverID")
    name: str = Field("", alias="Name")
    email_address: str = Field("", alias="EmailAddress")
    role: str = Field("", alias="Role")
    username: str = Field("", alias="Username")
    employee_id: int = Field(0, alias="EmployeeID")
    department: str = Field("", alias="Department")
    is_admin: bool = Field(False, alias="IsAdmin")
    fingerprint: str = Field("", alias="Fingerprint")
    public_key: str = Field("", alias="PublicKey")


class ApproverSetRevisionExport(RevisionExport):
    """One revision of an approver set and its declared members."""

    object_type: ClassVar[ObjectType] = ObjectType.APPROVER_SET
    compared_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("id", "ID"),
        ("approver_set_id", "ApproverSetID"),
        ("desired_state", "DesiredState"),
        ("title", "Title"),
        ("description", "Description"),
        *_NOTES_FIELDS,
    )
    compared_refs: ClassVar[tuple[tuple[str, str], ...]] = (
        ("approvers", "approvers"),
        *RevisionExport.compared_refs,
    )

    approver_set_id: int = Field(0, alias="ApproverSetID")
    title: str = Field("", alias="Title")
    description: str = Field("", alias="Description")
    approvers: ApproverRefs = Field((), alias="Approvers")


# Objects --------------------------------------------------------------------


class DomainExport(ExportModel):
    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    domain_name: str = Field("", alias="DomainName")
    domain_roid: str = Field("", alias="DomainROID")
    current_revision: DomainRevisionExport = Field(
        default_factory=DomainRevisionExport, alias="CurrentRevision"
    )
    pending_revision: DomainRevisionExport = Field(
        default_factory=DomainRevisionExport, alias="PendingRevision"
    )
    create_date: datetime = Field(ZERO_TIME, alias="CreateDate")
    update_date: datetime = Field(ZERO_TIME, alias="UpdateDate")
    expire_date: datetime = Field(ZERO_TIME, alias="ExpireDate")


class HostExport(ExportModel):
    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    host_name: str = Field("", alias="HostName")
    host_roid: str = Field("", alias="HostROID")
    current_revision: HostRevisionExport = Field(
        default_factory=HostRevisionExport, alias="CurrentRevision"
    )
    pending_revision: HostRevisionExport = Field(
        default_factory=HostRevisionExport, alias="PendingRevision"
    )


class ContactExport(ExportModel):
    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    contact_registry_id: str = Field("", alias="ContactRegistryID")
    contact_roid: str = Field("", alias="ContactROID")
    current_revision: ContactRevisionExport = Field(
        default_factory=ContactRevisionExport, alias="CurrentRevision"
    )
    pending_revision: ContactRevisionExport = Field(
        default_factory=ContactRevisionExport, alias="PendingRevision"
    )


class ApproverExportFull(ExportModel):
    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    current_revision: ApproverRevisionExport = Field(
        default_factory=ApproverRevisionExport, alias="CurrentRevision"
    )
    pending_revision: ApproverRevisionExport = Field(
        default_factory=ApproverRevisionExport, alias="PendingRevision"
    )
    created_at: datetime = Field(ZERO_TIME, alias="CreatedAt")
    created_by: str = Field("", alias="CreatedBy")


class ApproverSetExportFull(ExportModel):
    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    current_revision: ApproverSetRevisionExport = Field(
        default_factory=ApproverSetRevisionExport, alias="CurrentRevision"
    )
    pending_revision: ApproverSetRevisionExport = Field(
        default_factory=ApproverSetRevisionExport, alias="PendingRevision"
    )
    created_at: datetime = Field(ZERO_TIME, alias="CreatedAt")
    created_by: str = Field("", alias="CreatedBy")


# Change requests ------------------------------------------------------------


class ApprovalExport(ExportModel):
    """A single decision record on a change request.

    The decision itself is only recoverable from ``signature``.
    """

    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    is_signed: bool = Field(False, alias="IsSigned")
    is_final_approval: bool = Field(False, alias="IsFinalApproval")
    change_request_id: int = Field(0, alias="ChangeRequestID")
    approver_set_id: int = Field(0, alias="ApproverSetID")
    signature: SignatureBytes = Field(b"", alias="Signature")
    created_at: datetime = Field(ZERO_TIME, alias="CreatedAt")
    created_by: str = Field("", alias="CreatedBy")


Approvals = Annotated[tuple[ApprovalExport, ...], BeforeValidator(none_as_empty)]


class ChangeRequestExport(ExportModel):
    id: int = Field(0, alias="ID")
    state: str = Field("", alias="State")
    registrar_object_type: str = Field("", alias="RegistrarObjectType")
    registrar_object_id: int = Field(0, alias="RegistrarObjectID")
    initial_revision_id: int = Field(0, alias="InitialRevisionID")
    proposed_revision_id: int = Field(0, alias="ProposedRevisionID")
    approvals: Approvals = Field((), alias="Approvals")
    created_at: datetime = Field(ZERO_TIME, alias="CreatedAt")
    created_by: str = Field("", alias="CreatedBy")

    def final_approval(self) -> ApprovalExport | None:
        """Return the first approval flagged as final, if any."""
        for approval in self.approvals:
            if approval.is_final_approval:
                return approval
        return None


RegistrarObjectExport = Union[
    DomainExport,
    HostExport,
    ContactExport,
    ApproverExportFull,
    ApproverSetExportFull,
    ChangeRequestExport,
    ApprovalExport,
]

VerifiableExport = Union[
    DomainExport,
    HostExport,
    ContactExport,
    ApproverExportFull,
    ApproverSetExportFull,
]

EXPORT_MODELS: dict[ObjectType, type[ExportModel]] = {
    ObjectType.DOMAIN: DomainExport,
    ObjectType.HOST: HostExport,
    ObjectType.CONTACT: ContactExport,
    ObjectType.APPROVER: ApproverExportFull,
    ObjectType.APPROVER_SET: ApproverSetExportFull,
    ObjectType.CHANGE_REQUEST: ChangeRequestExport,
    ObjectType.APPROVAL: ApprovalExport,
}


def decode_export(object_type: ObjectType, raw: bytes | str) -> Any:
    """Decode a JSON export document of the given kind.

    Args:
        object_type: Kind of document expected.
        raw: The JSON document.

    Returns:
        The decoded export model.

    Raises:
        ExportDecodeError: If the document is not a valid export.
    """
    model = EXPORT_MODELS[object_type]
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise ExportDecodeError(
            f"Unable to decode {object_type.value} export: {exc.error_count()} error(s)"
        ) from exc


def object_type_of(export: ExportModel) -> ObjectType:
    """Return the registrar object type of an export instance."""
    for object_type, model in EXPORT_MODELS.items():
        if type(export) is model:
            return object_type
    raise TypeError(f"{type(export).__name__} is not a registrar export")
