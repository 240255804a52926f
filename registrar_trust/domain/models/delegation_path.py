"""Delegation path tracking for trust chain traversal.

Verifying an approval may require verifying the approver set that made
it, which requires verifying each of its approvers, whose own change
requests were approved by yet another approver set, and so on. The path
records every revision entered on the way down so that cyclic or overly
deep histories terminate.

Usage:
    path = DelegationPath.root(max_depth=32)
    child = path.descend(ObjectType.APPROVER_SET, 4, 17)  # may raise
"""

from __future__ import annotations

from dataclasses import dataclass, field

from registrar_trust.domain.errors.trust_chain import (
    TrustChainCycleError,
    TrustChainDepthExceededError,
)
from registrar_trust.domain.models.registrar_object import ObjectType

DEFAULT_MAX_DEPTH: int = 32

# (object_type, object_id, revision_id)
PathKey = tuple[str, int, int]


@dataclass(frozen=True)
class DelegationPath:
    """Immutable record of the revisions entered on the current call path.

    Attributes:
        max_depth: Maximum number of revisions that may be entered.
        visited: Keys of the revisions already on this path.
        depth: Number of revisions entered so far.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    visited: frozenset[PathKey] = field(default_factory=frozenset)
    depth: int = 0

    def __post_init__(self) -> None:
        """Validate path values."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.depth < 0:
            raise ValueError(f"depth must be non-negative, got {self.depth}")

    @classmethod
    def root(cls, max_depth: int = DEFAULT_MAX_DEPTH) -> DelegationPath:
        """Create an empty path for a top-level verification call."""
        return cls(max_depth=max_depth)

    def descend(
        self,
        object_type: ObjectType,
        object_id: int,
        revision_id: int,
    ) -> DelegationPath:
        """Return a new path that includes the given revision.

        Args:
            object_type: Kind of object being entered.
            object_id: Object identifier.
            revision_id: Identifier of the revision being verified.

        Returns:
            The extended path.

        Raises:
            TrustChainCycleError: If the revision is already on the path.
            TrustChainDepthExceededError: If the path would exceed max_depth.
        """
        key: PathKey = (object_type.value, object_id, revision_id)
        if key in self.visited:
            raise TrustChainCycleError(object_type.value, object_id, revision_id)
        if self.depth + 1 > self.max_depth:
            raise TrustChainDepthExceededError(self.max_depth)
        return DelegationPath(
            max_depth=self.max_depth,
            visited=self.visited | {key},
            depth=self.depth + 1,
        )
