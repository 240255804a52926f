"""Key sets that can vouch for the origin of a signed approval.

Two kinds of key set exist. ``TrustAnchorSet`` holds the operator-pinned
root keys and lives for the whole process. ``VerifiedApproverSet`` holds
the keys of the members of one approver-set revision that were themselves
verified; it is built per verification call and never shared.

Both answer the same question: was this blob signed by one of my keys?
A positive answer says nothing about whether the signed content is
acceptable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from structlog import get_logger

from registrar_trust.application.dtos.exports import (
    ApproverExportFull,
    ApproverSetRevisionExport,
)
from registrar_trust.application.ports.clearsign import (
    ClearsignVerifierProtocol,
    PublicKey,
    SignatureCheck,
)
from registrar_trust.domain.errors.signature import InvalidPublicKeyError

logger = get_logger()


class KeySet(ABC):
    """A set of public keys that can check clearsigned blobs."""

    def __init__(self, verifier: ClearsignVerifierProtocol) -> None:
        self._verifier = verifier

    @property
    @abstractmethod
    def keys(self) -> tuple[PublicKey, ...]:
        """Keys in this set."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Short description used in error messages."""
        ...

    def is_signed_by(self, blob: bytes) -> SignatureCheck:
        """Check whether blob was signed by any key in this set.

        Args:
            blob: Clearsigned approval signature.

        Returns:
            SignatureCheck; invalid for malformed blobs or no matching key.
        """
        keys = self.keys
        if not keys or not blob:
            return SignatureCheck.invalid()
        return self._verifier.verify(blob, keys)

    def __len__(self) -> int:
        return len(self.keys)


class TrustAnchorSet(KeySet):
    """Operator-pinned root keys.

    Populated once at startup. An empty set verifies nothing.
    """

    def __init__(self, verifier: ClearsignVerifierProtocol) -> None:
        super().__init__(verifier)
        self._keys: list[PublicKey] = []

    @classmethod
    def from_files(
        cls,
        verifier: ClearsignVerifierProtocol,
        paths: Iterable[str | Path],
    ) -> TrustAnchorSet:
        """Build an anchor set from armored public key files.

        Args:
            verifier: Signature backend used to load and check keys.
            paths: Files each holding one armored public key.

        Returns:
            The populated anchor set.

        Raises:
            InvalidPublicKeyError: If a file does not hold a usable key.
            OSError: If a file cannot be read.
        """
        anchors = cls(verifier)
        for path in paths:
            anchors.add_key(Path(path).read_text(encoding="utf-8"))
            logger.info("trust_anchor_loaded", path=str(path))
        return anchors

    def add_key(self, armored: str | bytes) -> PublicKey:
        """Load and pin one armored public key.

        Raises:
            InvalidPublicKeyError: If the material is not a usable key.
        """
        key = self._verifier.load_public_key(armored)
        self._keys.append(key)
        return key

    @property
    def keys(self) -> tuple[PublicKey, ...]:
        return tuple(self._keys)

    def describe(self) -> str:
        return f"trust anchors: {len(self._keys)} key(s)"


class VerifiedApproverSet(KeySet):
    """The verified members of one approver-set revision.

    Attributes:
        revision: The approver-set revision the members belong to.
        approvers: Members that verified, in declaration order.
    """

    def __init__(
        self,
        verifier: ClearsignVerifierProtocol,
        revision: ApproverSetRevisionExport,
    ) -> None:
        super().__init__(verifier)
        self.revision = revision
        self.approvers: list[ApproverExportFull] = []
        self._keys: list[PublicKey] = []

    def add_approver(self, approver: ApproverExportFull) -> None:
        """Admit a verified approver, loading its public key.

        Raises:
            InvalidPublicKeyError: If the approver's key cannot be loaded.
                The approver is not admitted in that case.
        """
        public_key = approver.current_revision.public_key
        if not public_key:
            raise InvalidPublicKeyError(f"Approver {approver.id} has no public key")
        key = self._verifier.load_public_key(public_key)
        self._keys.append(key)
        self.approvers.append(approver)

    @property
    def approver_set_id(self) -> int:
        return self.revision.approver_set_id

    @property
    def keys(self) -> tuple[PublicKey, ...]:
        return tuple(self._keys)

    def describe(self) -> str:
        return (
            f"approver set {self.approver_set_id}: "
            f"{len(self.approvers)} verified approver(s)"
        )
