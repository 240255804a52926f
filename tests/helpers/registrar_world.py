"""Builder for signed registrar histories.

RegistrarWorld creates approvers, approver sets and managed objects in an
InMemoryObjectStore, each authorized by a change request whose final
approval is clearsigned with real OpenPGP keys, exactly as the registrar
would record them. Tests then tamper with or extend the history to
exercise a verification path.

Usage:
    world = RegistrarWorld()
    alice = world.add_approver(signer=world.anchor_key)
    admins = world.add_approver_set([alice], signer=world.anchor_key)
    domain = world.add_domain(signer=alice.key, approver_set_id=admins.id)
    result = await world.verifier().get_verified_domain(domain.id, world.now)
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from pgpy import PGPKey

from registrar_trust.application.dtos.attestation import encode_attestation
from registrar_trust.application.dtos.exports import (
    ApprovalExport,
    ApproverExportFull,
    ApproverExportShort,
    ApproverRevisionExport,
    ApproverSetExportFull,
    ApproverSetRevisionExport,
    ChangeRequestExport,
    ContactExport,
    ContactExportShort,
    ContactRevisionExport,
    DomainExport,
    DomainRevisionExport,
    DSDataEntry,
    HostAddress,
    HostExport,
    HostExportShort,
    HostRevisionExport,
)
from registrar_trust.application.services.key_sets import TrustAnchorSet
from registrar_trust.application.services.trust_chain_verifier import (
    TrustChainVerifier,
)
from registrar_trust.domain.models.registrar_object import ApprovalAction, ObjectType
from registrar_trust.infrastructure.adapters.openpgp_clearsign import (
    OpenPGPClearsignVerifier,
    clearsign,
    generate_signing_key,
    key_fingerprint,
    public_key_armor,
)
from registrar_trust.infrastructure.stubs.object_store_stub import InMemoryObjectStore

GENESIS = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass
class Approver:
    """An approver as stored, plus the private key only the approver holds."""

    export: ApproverExportFull
    key: PGPKey

    @property
    def id(self) -> int:
        return self.export.id


class RegistrarWorld:
    """A registrar history under construction."""

    def __init__(self, with_anchor: bool = True) -> None:
        self.store = InMemoryObjectStore()
        self.signatures = OpenPGPClearsignVerifier()
        self.anchor_key = generate_signing_key("Registrar Root")
        self.anchors = TrustAnchorSet(self.signatures)
        if with_anchor:
            self.anchors.add_key(public_key_armor(self.anchor_key))
        self.now = GENESIS
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)

    def tick(self, hours: int = 1) -> datetime:
        """Advance the clock and return the new time."""
        self.now = self.now + timedelta(hours=hours)
        return self.now

    def verifier(self, max_depth: int = 32) -> TrustChainVerifier:
        return TrustChainVerifier(
            store=self.store,
            trust_anchors=self.anchors,
            signatures=self.signatures,
            max_depth=max_depth,
        )

    # Change requests ----------------------------------------------------

    def sign_change(
        self,
        object_type: ObjectType,
        proposed: Any,
        signer: PGPKey,
        *,
        approver_set_id: int = 0,
        action: ApprovalAction = ApprovalAction.APPROVED,
        attested_type: str | None = None,
        at: datetime | None = None,
    ) -> ChangeRequestExport:
        """Record a change request whose final approval signer clearsigned.

        Args:
            object_type: Kind of object the change request modifies.
            proposed: Full export as presented to the approver, with the
                proposed revision as pending_revision.
            signer: Key that signs the approval.
            approver_set_id: Approver set the approval is rendered for.
            action: Decision recorded in the attestation.
            attested_type: ObjectType written into the attestation, when it
                should differ from object_type.
            at: Time of the change request and its approval.
        """
        at = at or self.now
        change_request_id = self.next_id()
        approval_id = self.next_id()
        payload = encode_attestation(
            approval_id,
            action,
            attested_type or object_type.value,
            proposed,
            username="approver",
        )
        approval = ApprovalExport(
            id=approval_id,
            state="approved" if action is ApprovalAction.APPROVED else "declined",
            is_signed=True,
            is_final_approval=True,
            change_request_id=change_request_id,
            approver_set_id=approver_set_id,
            signature=clearsign(payload, signer),
            created_at=at,
        )
        change_request = ChangeRequestExport(
            id=change_request_id,
            state="implemented",
            registrar_object_type=object_type.value,
            registrar_object_id=proposed.id,
            proposed_revision_id=proposed.pending_revision.id,
            approvals=(approval,),
            created_at=at,
        )
        self.store.put(change_request)
        return change_request

    def publish(
        self,
        proposed: Any,
        change_request: ChangeRequestExport,
        at: datetime | None = None,
        **revision_changes: Any,
    ) -> Any:
        """Store the object with its proposed revision made current.

        Keyword arguments alter the stored current revision, which is how
        tests simulate tampering after signing.
        """
        revision = proposed.pending_revision.model_copy(
            update={
                "change_request_id": change_request.id,
                "revision_state": "bakedin",
                **revision_changes,
            }
        )
        live = proposed.model_copy(
            update={
                "current_revision": revision,
                "pending_revision": type(revision)(),
                "state": "active",
            }
        )
        self.store.put(live, valid_from=at or self.now)
        return live

    # Approvers ----------------------------------------------------------

    def propose_approver(
        self,
        key: PGPKey,
        approver_id: int | None = None,
        name: str = "Approver",
    ) -> ApproverExportFull:
        approver_id = approver_id or self.next_id()
        return ApproverExportFull(
            id=approver_id,
            state="new",
            pending_revision=ApproverRevisionExport(
                id=self.next_id(),
                approver_id=approver_id,
                desired_state="active",
                name=name,
                email_address=f"{name.lower().replace(' ', '.')}@registrar.example",
                role="Engineer",
                username=name.lower().replace(" ", ""),
                employee_id=approver_id,
                department="Operations",
                fingerprint=key_fingerprint(key),
                public_key=public_key_armor(key),
            ),
        )

    def add_approver(
        self,
        signer: PGPKey,
        *,
        approver_set_id: int = 0,
        name: str = "Approver",
        action: ApprovalAction = ApprovalAction.APPROVED,
        at: datetime | None = None,
        **revision_changes: Any,
    ) -> Approver:
        key = generate_signing_key(name)
        proposed = self.propose_approver(key, name=name)
        change_request = self.sign_change(
            ObjectType.APPROVER,
            proposed,
            signer,
            approver_set_id=approver_set_id,
            action=action,
            at=at,
        )
        live = self.publish(proposed, change_request, at, **revision_changes)
        return Approver(export=live, key=key)

    # Approver sets ------------------------------------------------------

    def propose_approver_set(
        self,
        members: list[Approver],
        approver_set_id: int | None = None,
        title: str = "Approvers",
    ) -> ApproverSetExportFull:
        approver_set_id = approver_set_id or self.next_id()
        return ApproverSetExportFull(
            id=approver_set_id,
            state="new",
            pending_revision=ApproverSetRevisionExport(
                id=self.next_id(),
                approver_set_id=approver_set_id,
                desired_state="active",
                title=title,
                description=f"{title} for registrar changes",
                approvers=tuple(
                    ApproverExportShort(id=member.id, state="active")
                    for member in members
                ),
            ),
        )

    def add_approver_set(
        self,
        members: list[Approver],
        signer: PGPKey,
        *,
        approver_set_id: int = 0,
        existing_id: int | None = None,
        title: str = "Approvers",
        action: ApprovalAction = ApprovalAction.APPROVED,
        at: datetime | None = None,
        **revision_changes: Any,
    ) -> ApproverSetExportFull:
        proposed = self.propose_approver_set(members, existing_id, title)
        change_request = self.sign_change(
            ObjectType.APPROVER_SET,
            proposed,
            signer,
            approver_set_id=approver_set_id,
            action=action,
            at=at,
        )
        return self.publish(proposed, change_request, at, **revision_changes)

    # Domains and hosts --------------------------------------------------

    def propose_domain(self, name: str = "example.com") -> DomainExport:
        domain_id = self.next_id()
        registrant = ContactExportShort(
            id=self.next_id(), state="active", name="Registrant"
        )
        return DomainExport(
            id=domain_id,
            state="new",
            domain_name=name,
            domain_roid=f"D{domain_id}-REG",
            pending_revision=DomainRevisionExport(
                id=self.next_id(),
                domain_id=domain_id,
                desired_state="active",
                owners="DNS Operations",
                class_="high value",
                domain_registrant=registrant,
                domain_admin_contact=registrant,
                domain_tech_contact=registrant,
                domain_billing_contact=registrant,
                client_transfer_prohibited_status=True,
                server_delete_prohibited_status=True,
                hostnames=(
                    HostExportShort(id=101, host_name="ns1.example.net"),
                    HostExportShort(id=102, host_name="ns2.example.net"),
                ),
                ds_data_entries=(
                    DSDataEntry(
                        id=1,
                        key_tag=12345,
                        algorithm=13,
                        digest_type=2,
                        digest="4C2A7F0E9B3D",
                    ),
                ),
            ),
        )

    def add_domain(
        self,
        signer: PGPKey,
        *,
        approver_set_id: int = 0,
        action: ApprovalAction = ApprovalAction.APPROVED,
        attested_type: str | None = None,
        at: datetime | None = None,
        **revision_changes: Any,
    ) -> DomainExport:
        proposed = self.propose_domain()
        change_request = self.sign_change(
            ObjectType.DOMAIN,
            proposed,
            signer,
            approver_set_id=approver_set_id,
            action=action,
            attested_type=attested_type,
            at=at,
        )
        return self.publish(proposed, change_request, at, **revision_changes)

    def propose_host(self, name: str = "ns1.example.com") -> HostExport:
        host_id = self.next_id()
        revision_id = self.next_id()
        return HostExport(
            id=host_id,
            state="new",
            host_name=name,
            host_roid=f"H{host_id}-REG",
            pending_revision=HostRevisionExport(
                id=revision_id,
                host_id=host_id,
                desired_state="active",
                host_addresses=(
                    HostAddress(
                        id=1,
                        host_revision_id=revision_id,
                        ip_address="192.0.2.53",
                        protocol=4,
                    ),
                    HostAddress(
                        id=2,
                        host_revision_id=revision_id,
                        ip_address="2001:db8::53",
                        protocol=6,
                    ),
                ),
            ),
        )

    def add_host(
        self,
        signer: PGPKey,
        *,
        approver_set_id: int = 0,
        at: datetime | None = None,
        **revision_changes: Any,
    ) -> HostExport:
        proposed = self.propose_host()
        change_request = self.sign_change(
            ObjectType.HOST, proposed, signer, approver_set_id=approver_set_id, at=at
        )
        return self.publish(proposed, change_request, at, **revision_changes)

    # Contacts -----------------------------------------------------------

    def propose_contact(self, name: str = "Registrant") -> ContactExport:
        contact_id = self.next_id()
        return ContactExport(
            id=contact_id,
            state="new",
            contact_registry_id=f"C{contact_id}",
            contact_roid=f"C{contact_id}-REG",
            pending_revision=ContactRevisionExport(
                id=self.next_id(),
                contact_id=contact_id,
                desired_state="active",
                client_delete_prohibited_status=True,
                name=name,
                org="Registrar Operations",
                address_street1="1 Registry Way",
                address_city="Reston",
                address_state="VA",
                address_postal_code="20190",
                address_country="US",
                voice_phone_number="+1.7035550100",
                email_address="hostmaster@registrar.example",
            ),
        )

    def add_contact(
        self,
        signer: PGPKey,
        *,
        approver_set_id: int = 0,
        action: ApprovalAction = ApprovalAction.APPROVED,
        at: datetime | None = None,
        **revision_changes: Any,
    ) -> ContactExport:
        proposed = self.propose_contact()
        change_request = self.sign_change(
            ObjectType.CONTACT,
            proposed,
            signer,
            approver_set_id=approver_set_id,
            action=action,
            at=at,
        )
        return self.publish(proposed, change_request, at, **revision_changes)
