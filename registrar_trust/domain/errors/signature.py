"""Signature errors.

Provides exception classes for failures to establish the origin of a
signed approval. A signature failure against the trust anchors escalates
to the approving approver set before it becomes terminal.
"""

from __future__ import annotations

from registrar_trust.domain.exceptions import RegistrarTrustError


class SignatureError(RegistrarTrustError):
    """Base class for signature errors.

    All signature-related exceptions inherit from this class.
    """

    pass


class NoTrustAnchorsError(SignatureError):
    """No trust anchors are configured, so nothing can be verified."""

    def __init__(self) -> None:
        super().__init__("No trust anchors configured")


class InvalidPublicKeyError(SignatureError):
    """Public key material could not be loaded.

    Raised when:
    - The text is not an ASCII-armored OpenPGP key block
    """

    pass


class SignatureNotTrustedError(SignatureError):
    """The approval signature does not verify under the candidate key set."""

    def __init__(self, approval_id: int, key_set: str) -> None:
        self.approval_id = approval_id
        self.key_set = key_set
        super().__init__(
            f"Approval {approval_id} was not signed by anchor ({key_set})"
        )


class ApproverSetNotVerifiedError(SignatureError):
    """The approver set that rendered an approval could not be verified."""

    def __init__(self, approver_set_id: int) -> None:
        self.approver_set_id = approver_set_id
        super().__init__(f"Approver Set {approver_set_id} was not verified")
