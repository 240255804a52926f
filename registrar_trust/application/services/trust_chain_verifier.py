"""Trust chain verification service.

Proves that the live state of a registrar object is exactly what an
approver signed, and that the approver chains back to a pinned trust
anchor.

Verification walks down from an object to the change request that
authorized its current revision, then to that request's final approval.
The approval's signature is checked against the trust anchors first. If
the anchors did not sign it, the approver set that rendered the approval
is fetched as it was at approval time and verified recursively: its own
revision must be signed, must match what was signed, and at least one of
its declared approvers must verify in turn. The approval is then checked
against the keys of those verified approvers only.

Failure policy:
    Nothing is raised to the caller. Every operation returns a result with
    a ``verified`` flag and the errors collected on the way. Structural and
    content failures stop the walk at once. Failures of individual
    approvers inside a set are collected and tolerated as long as one
    approver verifies.

Bounds:
    Each call carries a DelegationPath. Entering an approver set or an
    object revision descends it; cycles and chains deeper than the
    configured maximum fail closed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar

from structlog import get_logger

from registrar_trust.application.dtos.attestation import (
    ApprovalAttestation,
    decode_attestation,
)
from registrar_trust.application.dtos.exports import (
    EXPORT_MODELS,
    ApprovalExport,
    ApproverExportFull,
    ApproverSetExportFull,
    ChangeRequestExport,
    ContactExport,
    DomainExport,
    ExportModel,
    HostExport,
    RevisionExport,
    decode_export,
)
from registrar_trust.application.dtos.verification import (
    ApproverSetVerification,
    ChangeRequestVerification,
    ObjectVerification,
)
from registrar_trust.application.ports.clearsign import ClearsignVerifierProtocol
from registrar_trust.application.ports.object_store import ObjectStoreProtocol
from registrar_trust.application.services.key_sets import (
    TrustAnchorSet,
    VerifiedApproverSet,
)
from registrar_trust.domain.errors import (
    ApproverSetNotVerifiedError,
    ChangeRequestNotApprovedError,
    InvalidChangeRequestIDError,
    InvalidPublicKeyError,
    NoChangeRequestError,
    NoCurrentRevisionError,
    NoFinalApprovalError,
    NoTrustAnchorsError,
    NoVerifiedApproversError,
    ObjectTypeMismatchError,
    SignatureNotTrustedError,
    UnexpectedObjectTypeError,
)
from registrar_trust.domain.exceptions import RegistrarTrustError
from registrar_trust.domain.models.delegation_path import (
    DEFAULT_MAX_DEPTH,
    DelegationPath,
)
from registrar_trust.domain.models.registrar_object import (
    VERIFIABLE_OBJECT_TYPES,
    ObjectType,
)
from registrar_trust.domain.models.timestamps import unix_timestamp

logger = get_logger()

ModelT = TypeVar("ModelT", bound=ExportModel)


class TrustChainVerifier:
    """Verifies change requests, approver sets and registrar objects.

    The verifier holds no mutable state. Every call builds its own
    VerifiedApproverSet instances, so concurrent calls are safe as long as
    the store and the signature backend are.

    Attributes:
        max_depth: Maximum delegation depth for a top-level call.
    """

    def __init__(
        self,
        store: ObjectStoreProtocol,
        trust_anchors: TrustAnchorSet,
        signatures: ClearsignVerifierProtocol,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Initialize the verifier.

        Args:
            store: Object store to fetch registrar objects from.
            trust_anchors: Pinned root keys.
            signatures: Signature backend for approver keys.
            max_depth: Maximum delegation depth.
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self._store = store
        self._anchors = trust_anchors
        self._signatures = signatures
        self.max_depth = max_depth

    # Change requests --------------------------------------------------------

    async def verify_change_request(
        self,
        change_request_id: int,
        expected_revision: RevisionExport | None = None,
        *,
        path: DelegationPath | None = None,
    ) -> ChangeRequestVerification:
        """Verify the final approval of a change request.

        Args:
            change_request_id: Change request to verify.
            expected_revision: Revision the caller expects the request to
                have authorized. Accepted for symmetry with the object
                verifiers; the comparison is done by the caller.
            path: Delegation path of the enclosing call, if any.

        Returns:
            ChangeRequestVerification carrying the signed export bytes and
            the decoded attestation when verified.
        """
        log = logger.bind(change_request_id=change_request_id)

        if change_request_id <= 0:
            return self._change_request_failed(
                log, InvalidChangeRequestIDError(change_request_id)
            )
        if not len(self._anchors):
            return self._change_request_failed(log, NoTrustAnchorsError())

        path = path or self._root_path()

        try:
            change_request = await self._fetch(
                ObjectType.CHANGE_REQUEST, change_request_id, ChangeRequestExport
            )
        except RegistrarTrustError as exc:
            return self._change_request_failed(log, exc)

        approval = change_request.final_approval()
        if approval is None:
            return self._change_request_failed(
                log, NoFinalApprovalError(change_request_id)
            )

        attestation, errors = await self._resolve_signed_attestation(approval, path)
        if attestation is None:
            return self._change_request_failed(log, *errors)

        if not attestation.is_approved:
            return self._change_request_failed(
                log,
                ChangeRequestNotApprovedError(change_request_id, attestation.action),
            )

        log.debug(
            "change_request_verified",
            approval_id=approval.id,
            object_type=attestation.object_type,
        )
        return ChangeRequestVerification(
            verified=True,
            signed_payload=attestation.export_rev,
            attestation=attestation,
        )

    # Approver sets ----------------------------------------------------------

    async def verify_approver_set(
        self,
        approver_set: ApproverSetExportFull,
        *,
        path: DelegationPath | None = None,
    ) -> ApproverSetVerification:
        """Verify an approver set's current revision and its members.

        The revision must be authorized by a signed, approving change
        request whose endorsed revision equals the current one. Each
        declared approver is then verified as it was when the change
        request was created. Approvers that fail are reported but do not
        fail the set unless none verify.

        Args:
            approver_set: The approver set as fetched from the store.
            path: Delegation path of the enclosing call, if any.

        Returns:
            ApproverSetVerification carrying the VerifiedApproverSet.
        """
        revision = approver_set.current_revision
        log = logger.bind(approver_set_id=approver_set.id, revision_id=revision.id)

        if revision.id <= 0:
            return self._approver_set_failed(
                log,
                NoCurrentRevisionError(
                    ObjectType.APPROVER_SET.display_name, approver_set.id
                ),
            )
        if revision.change_request_id <= 0:
            return self._approver_set_failed(
                log,
                NoChangeRequestError(ObjectType.APPROVER_SET.display_name, revision.id),
            )
        if not len(self._anchors):
            return self._approver_set_failed(log, NoTrustAnchorsError())

        try:
            path = (path or self._root_path()).descend(
                ObjectType.APPROVER_SET, approver_set.id, revision.id
            )
            change_request = await self._fetch(
                ObjectType.CHANGE_REQUEST,
                revision.change_request_id,
                ChangeRequestExport,
            )
        except RegistrarTrustError as exc:
            return self._approver_set_failed(log, exc)

        approval = change_request.final_approval()
        if approval is None:
            return self._approver_set_failed(
                log, NoFinalApprovalError(change_request.id)
            )

        attestation, errors = await self._resolve_signed_attestation(approval, path)
        if attestation is None:
            return self._approver_set_failed(log, *errors)

        if not attestation.is_approved:
            return self._approver_set_failed(
                log,
                ChangeRequestNotApprovedError(change_request.id, attestation.action),
            )
        if attestation.object_type != ObjectType.APPROVER_SET.value:
            return self._approver_set_failed(
                log,
                ObjectTypeMismatchError(
                    ObjectType.APPROVER_SET.value, attestation.object_type
                ),
            )

        try:
            signed_set = decode_export(ObjectType.APPROVER_SET, attestation.export_rev)
        except RegistrarTrustError as exc:
            return self._approver_set_failed(log, exc)

        same, mismatches = revision.compare_export(signed_set.pending_revision)
        if not same:
            return self._approver_set_failed(log, *mismatches)

        verified_set = VerifiedApproverSet(self._signatures, revision)
        member_errors: list[RegistrarTrustError] = []
        for member in revision.approvers:
            result = await self.get_verified_approver(
                member.id, change_request.created_at, path=path
            )
            if not result.verified or result.obj is None:
                log.warning(
                    "approver_not_verified",
                    approver_id=member.id,
                    errors=[str(error) for error in result.errors],
                )
                member_errors.extend(result.errors)
                continue
            try:
                verified_set.add_approver(result.obj)
            except InvalidPublicKeyError as exc:
                log.warning(
                    "approver_key_unusable", approver_id=member.id, error=str(exc)
                )
                member_errors.append(exc)

        if not len(verified_set):
            member_errors.append(
                NoVerifiedApproversError(
                    approver_set.id, unix_timestamp(change_request.created_at)
                )
            )
            return self._approver_set_failed(log, *member_errors)

        log.debug(
            "approver_set_verified",
            verified_approvers=len(verified_set),
            declared_approvers=len(revision.approvers),
        )
        return ApproverSetVerification(
            verified=True,
            verified_set=verified_set,
            errors=tuple(member_errors),
        )

    # Objects ----------------------------------------------------------------

    async def get_verified_domain(
        self,
        domain_id: int,
        timestamp: datetime,
        *,
        path: DelegationPath | None = None,
    ) -> ObjectVerification[DomainExport]:
        """Fetch a domain as of timestamp and verify its current revision."""
        return await self._get_verified(ObjectType.DOMAIN, domain_id, timestamp, path)

    async def get_verified_host(
        self,
        host_id: int,
        timestamp: datetime,
        *,
        path: DelegationPath | None = None,
    ) -> ObjectVerification[HostExport]:
        """Fetch a host as of timestamp and verify its current revision."""
        return await self._get_verified(ObjectType.HOST, host_id, timestamp, path)

    async def get_verified_contact(
        self,
        contact_id: int,
        timestamp: datetime,
        *,
        path: DelegationPath | None = None,
    ) -> ObjectVerification[ContactExport]:
        """Fetch a contact as of timestamp and verify its current revision."""
        return await self._get_verified(ObjectType.CONTACT, contact_id, timestamp, path)

    async def get_verified_approver(
        self,
        approver_id: int,
        timestamp: datetime,
        *,
        path: DelegationPath | None = None,
    ) -> ObjectVerification[ApproverExportFull]:
        """Fetch an approver as of timestamp and verify its current revision."""
        return await self._get_verified(
            ObjectType.APPROVER, approver_id, timestamp, path
        )

    async def get_verified_approver_set(
        self,
        approver_set_id: int,
        timestamp: datetime,
        *,
        path: DelegationPath | None = None,
    ) -> ObjectVerification[ApproverSetExportFull]:
        """Fetch an approver set as of timestamp and verify its current revision."""
        return await self._get_verified(
            ObjectType.APPROVER_SET, approver_set_id, timestamp, path
        )

    async def get_verified(
        self,
        object_type: ObjectType,
        object_id: int,
        timestamp: datetime,
    ) -> ObjectVerification[Any]:
        """Dispatch to the object verifier for object_type.

        Raises:
            ValueError: If object_type does not carry revisions.
        """
        if object_type not in VERIFIABLE_OBJECT_TYPES:
            raise ValueError(f"{object_type.value} objects cannot be verified")
        return await self._get_verified(object_type, object_id, timestamp, None)

    async def _get_verified(
        self,
        object_type: ObjectType,
        object_id: int,
        timestamp: datetime,
        path: DelegationPath | None,
    ) -> ObjectVerification[Any]:
        log = logger.bind(object_type=object_type.value, object_id=object_id)
        model = EXPORT_MODELS[object_type]

        try:
            obj = await self._fetch_at(object_type, object_id, timestamp, model)
        except RegistrarTrustError as exc:
            return self._object_failed(log, exc)

        revision = obj.current_revision
        if revision.id <= 0:
            return self._object_failed(
                log, NoCurrentRevisionError(object_type.display_name, object_id)
            )
        if revision.change_request_id <= 0:
            return self._object_failed(
                log, NoChangeRequestError(object_type.display_name, revision.id)
            )

        try:
            path = (path or self._root_path()).descend(
                object_type, object_id, revision.id
            )
        except RegistrarTrustError as exc:
            return self._object_failed(log, exc)

        change_request = await self.verify_change_request(
            revision.change_request_id, revision, path=path
        )
        if not change_request.verified or change_request.attestation is None:
            return self._object_failed(log, *change_request.errors)

        if change_request.attestation.object_type != object_type.value:
            return self._object_failed(
                log,
                ObjectTypeMismatchError(
                    object_type.value, change_request.attestation.object_type
                ),
            )

        try:
            signed = decode_export(object_type, change_request.signed_payload)
        except RegistrarTrustError as exc:
            return self._object_failed(log, exc)

        same, mismatches = revision.compare_export(signed.pending_revision)
        if not same:
            log.warning(
                "object_revision_mismatch",
                revision_id=revision.id,
                fields=[error.field_name for error in mismatches],
            )
            return ObjectVerification(verified=False, errors=tuple(mismatches))

        log.debug("object_verified", revision_id=revision.id)
        return ObjectVerification(verified=True, obj=obj)

    # Helpers ----------------------------------------------------------------

    async def _resolve_signed_attestation(
        self,
        approval: ApprovalExport,
        path: DelegationPath,
    ) -> tuple[ApprovalAttestation | None, list[RegistrarTrustError]]:
        """Establish who signed an approval and decode what they signed.

        The trust anchors are tried first. Otherwise the approver set that
        rendered the approval must verify, and the signature must verify
        under its verified approvers' keys.

        Returns:
            (attestation, []) on success, (None, errors) otherwise.
        """
        log = logger.bind(
            approval_id=approval.id, approver_set_id=approval.approver_set_id
        )

        check = self._anchors.is_signed_by(approval.signature)
        if not check.valid:
            log.debug("approval_not_anchor_signed")
            try:
                approver_set = await self._fetch_at(
                    ObjectType.APPROVER_SET,
                    approval.approver_set_id,
                    approval.created_at,
                    ApproverSetExportFull,
                )
            except RegistrarTrustError as exc:
                return None, [
                    ApproverSetNotVerifiedError(approval.approver_set_id),
                    exc,
                ]

            result = await self.verify_approver_set(approver_set, path=path)
            if not result.verified or result.verified_set is None:
                return None, [
                    ApproverSetNotVerifiedError(approval.approver_set_id),
                    *result.errors,
                ]

            check = result.verified_set.is_signed_by(approval.signature)
            if not check.valid:
                return None, [
                    SignatureNotTrustedError(
                        approval.id, result.verified_set.describe()
                    )
                ]

        try:
            return decode_attestation(check.payload), []
        except RegistrarTrustError as exc:
            return None, [exc]

    async def _fetch(
        self,
        object_type: ObjectType,
        object_id: int,
        model: type[ModelT],
    ) -> ModelT:
        obj = await self._store.get_object(object_type, object_id)
        return self._expect(object_type, obj, model)

    async def _fetch_at(
        self,
        object_type: ObjectType,
        object_id: int,
        at_time: datetime,
        model: type[ModelT],
    ) -> ModelT:
        obj = await self._store.get_object_at(object_type, object_id, at_time)
        return self._expect(object_type, obj, model)

    @staticmethod
    def _expect(object_type: ObjectType, obj: Any, model: type[ModelT]) -> ModelT:
        if not isinstance(obj, model):
            raise UnexpectedObjectTypeError(object_type.value, type(obj).__name__)
        return obj

    def _root_path(self) -> DelegationPath:
        return DelegationPath.root(self.max_depth)

    @staticmethod
    def _change_request_failed(
        log: Any, *errors: RegistrarTrustError
    ) -> ChangeRequestVerification:
        log.info("change_request_not_verified", errors=[str(e) for e in errors])
        return ChangeRequestVerification(verified=False, errors=tuple(errors))

    @staticmethod
    def _approver_set_failed(
        log: Any, *errors: RegistrarTrustError
    ) -> ApproverSetVerification:
        log.info("approver_set_not_verified", errors=[str(e) for e in errors])
        return ApproverSetVerification(verified=False, errors=tuple(errors))

    @staticmethod
    def _object_failed(
        log: Any, *errors: RegistrarTrustError
    ) -> ObjectVerification[Any]:
        log.info("object_not_verified", errors=[str(e) for e in errors])
        return ObjectVerification(verified=False, errors=tuple(errors))
