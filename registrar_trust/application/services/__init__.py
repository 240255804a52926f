"""Application services - Trust chain verification."""

from registrar_trust.application.services.key_sets import (
    KeySet,
    TrustAnchorSet,
    VerifiedApproverSet,
)
from registrar_trust.application.services.trust_chain_verifier import (
    TrustChainVerifier,
)

__all__: list[str] = [
    "KeySet",
    "TrustAnchorSet",
    "TrustChainVerifier",
    "VerifiedApproverSet",
]
