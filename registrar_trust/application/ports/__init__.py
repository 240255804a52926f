"""Application ports - Abstract interfaces for infrastructure adapters.

Ports define the contracts that infrastructure adapters must implement.
This enables dependency inversion and keeps the verifier independent of
the registrar API and of the signature backend.
"""

from registrar_trust.application.ports.clearsign import (
    ClearsignVerifierProtocol,
    PublicKey,
    SignatureCheck,
)
from registrar_trust.application.ports.object_store import ObjectStoreProtocol

__all__: list[str] = [
    "ClearsignVerifierProtocol",
    "ObjectStoreProtocol",
    "PublicKey",
    "SignatureCheck",
]
