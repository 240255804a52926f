"""Trust chain bound errors.

Delegation history is data, and data can be cyclic or arbitrarily deep.
Both conditions fail closed.
"""

from __future__ import annotations

from registrar_trust.domain.exceptions import RegistrarTrustError


class TrustChainError(RegistrarTrustError):
    """Base class for trust chain traversal errors."""

    pass


class TrustChainDepthExceededError(TrustChainError):
    """The delegation chain is deeper than the configured maximum."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(f"Trust chain exceeds maximum depth of {max_depth}")


class TrustChainCycleError(TrustChainError):
    """A revision was reached again while verifying itself."""

    def __init__(self, object_type: str, object_id: int, revision_id: int) -> None:
        self.object_type = object_type
        self.object_id = object_id
        self.revision_id = revision_id
        super().__init__(
            f"Trust chain cycle detected at {object_type} {object_id} "
            f"revision {revision_id}"
        )
