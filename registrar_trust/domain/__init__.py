"""
Domain layer - Pure verification concepts for registrar-trust.

This layer contains:
- Registrar object kinds and approval actions
- Delegation path bounds for trust chain traversal
- Domain exceptions

CRITICAL: This layer must NOT import from application or infrastructure.
Only stdlib and typing imports are allowed.
"""

from registrar_trust.domain.exceptions import RegistrarTrustError
from registrar_trust.domain.models import ApprovalAction, DelegationPath, ObjectType

__all__: list[str] = [
    "ApprovalAction",
    "DelegationPath",
    "ObjectType",
    "RegistrarTrustError",
]
