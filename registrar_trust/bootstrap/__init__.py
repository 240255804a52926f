"""Bootstrap - Wiring of configuration, adapters and services."""

from registrar_trust.bootstrap.verifier import (
    create_object_store,
    create_signature_backend,
    create_trust_chain_verifier,
    load_trust_anchors,
)

__all__ = [
    "create_object_store",
    "create_signature_backend",
    "create_trust_chain_verifier",
    "load_trust_anchors",
]
