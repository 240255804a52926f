"""Bootstrap wiring for trust chain verification."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from registrar_trust.application.ports.clearsign import ClearsignVerifierProtocol
from registrar_trust.application.ports.object_store import ObjectStoreProtocol
from registrar_trust.application.services.key_sets import TrustAnchorSet
from registrar_trust.application.services.trust_chain_verifier import (
    TrustChainVerifier,
)
from registrar_trust.config.verifier_config import VerifierConfig
from registrar_trust.infrastructure.adapters.openpgp_clearsign import (
    OpenPGPClearsignVerifier,
)
from registrar_trust.infrastructure.adapters.registrar_api import (
    RegistrarAPIObjectStore,
)
from registrar_trust.infrastructure.stubs.object_store_stub import InMemoryObjectStore


def create_signature_backend() -> ClearsignVerifierProtocol:
    """Get the signature backend."""
    return OpenPGPClearsignVerifier()


def create_object_store(
    config: VerifierConfig,
    snapshot: str | Path | None = None,
) -> ObjectStoreProtocol:
    """Create the object store for a verification run.

    A snapshot file takes precedence over the registrar API.

    Raises:
        ValueError: If neither a snapshot nor an API URL is available.
        ObjectStoreError: If the snapshot cannot be loaded.
    """
    if snapshot is not None:
        return InMemoryObjectStore.from_snapshot_file(snapshot)
    if not config.api_url:
        raise ValueError("No registrar API URL configured and no snapshot given")
    return RegistrarAPIObjectStore(
        config.api_url,
        timeout=config.api_timeout,
        client_cert=config.client_cert,
        client_key=config.client_key,
        ca_bundle=config.ca_bundle,
    )


def load_trust_anchors(
    signatures: ClearsignVerifierProtocol,
    paths: Iterable[str | Path],
) -> TrustAnchorSet:
    """Load the pinned trust anchors.

    Raises:
        InvalidPublicKeyError: If an anchor file holds no usable key.
        OSError: If an anchor file cannot be read.
    """
    return TrustAnchorSet.from_files(signatures, paths)


def create_trust_chain_verifier(
    config: VerifierConfig,
    store: ObjectStoreProtocol,
    signatures: ClearsignVerifierProtocol | None = None,
    anchor_files: Iterable[str | Path] | None = None,
) -> TrustChainVerifier:
    """Wire a TrustChainVerifier.

    Args:
        config: Verifier configuration.
        store: Object store to verify against.
        signatures: Signature backend. Defaults to OpenPGP.
        anchor_files: Anchor files overriding config.trust_anchor_files.
    """
    signatures = signatures or create_signature_backend()
    paths = config.trust_anchor_files if anchor_files is None else anchor_files
    return TrustChainVerifier(
        store=store,
        trust_anchors=load_trust_anchors(signatures, paths),
        signatures=signatures,
        max_depth=config.max_depth,
    )
