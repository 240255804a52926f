"""Domain models for registrar-trust.

Contains value objects that represent core verification concepts. These
models are immutable and contain no infrastructure dependencies.
"""

from registrar_trust.domain.models.delegation_path import (
    DEFAULT_MAX_DEPTH,
    DelegationPath,
)
from registrar_trust.domain.models.registrar_object import (
    VERIFIABLE_OBJECT_TYPES,
    ApprovalAction,
    ObjectType,
)

__all__: list[str] = [
    "DEFAULT_MAX_DEPTH",
    "VERIFIABLE_OBJECT_TYPES",
    "ApprovalAction",
    "DelegationPath",
    "ObjectType",
]
