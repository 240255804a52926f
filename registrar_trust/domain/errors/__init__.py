"""Domain errors for registrar-trust.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from RegistrarTrustError.
"""

from registrar_trust.domain.errors.consistency import (
    ConsistencyError,
    NoVerifiedApproversError,
    RevisionMismatchError,
)
from registrar_trust.domain.errors.content import (
    AttestationDecodeError,
    ChangeRequestNotApprovedError,
    ContentError,
    ExportDecodeError,
    ObjectTypeMismatchError,
)
from registrar_trust.domain.errors.object_store import (
    ObjectNotFoundError,
    ObjectStoreError,
    UnexpectedObjectTypeError,
)
from registrar_trust.domain.errors.precondition import (
    InvalidChangeRequestIDError,
    NoChangeRequestError,
    NoCurrentRevisionError,
    NoFinalApprovalError,
    PreconditionError,
)
from registrar_trust.domain.errors.signature import (
    ApproverSetNotVerifiedError,
    InvalidPublicKeyError,
    NoTrustAnchorsError,
    SignatureError,
    SignatureNotTrustedError,
)
from registrar_trust.domain.errors.trust_chain import (
    TrustChainCycleError,
    TrustChainDepthExceededError,
    TrustChainError,
)

__all__: list[str] = [
    "ApproverSetNotVerifiedError",
    "AttestationDecodeError",
    "ChangeRequestNotApprovedError",
    "ConsistencyError",
    "ContentError",
    "ExportDecodeError",
    "InvalidChangeRequestIDError",
    "InvalidPublicKeyError",
    "NoChangeRequestError",
    "NoCurrentRevisionError",
    "NoFinalApprovalError",
    "NoTrustAnchorsError",
    "NoVerifiedApproversError",
    "ObjectNotFoundError",
    "ObjectStoreError",
    "ObjectTypeMismatchError",
    "PreconditionError",
    "RevisionMismatchError",
    "SignatureError",
    "SignatureNotTrustedError",
    "TrustChainCycleError",
    "TrustChainDepthExceededError",
    "TrustChainError",
    "UnexpectedObjectTypeError",
]
