"""OpenPGP clearsign adapter.

Implements ClearsignVerifierProtocol with PGPy. Approver and anchor keys
are ASCII-armored OpenPGP public keys, as stored in approver revisions.
Approvals are OpenPGP cleartext signed messages:

    -----BEGIN PGP SIGNED MESSAGE-----
    Hash: SHA256

    {"ApprovalID": 12, ...}
    -----BEGIN PGP SIGNATURE-----
    ...
    -----END PGP SIGNATURE-----

A key's id is its full fingerprint. Only keys whose primary key or subkey
issued one of the message's signatures are tried.

The signing helpers are for approver tooling and tests; the verifier
itself never needs a secret key.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from pgpy import PGPKey, PGPMessage, PGPUID
from pgpy.constants import (
    EllipticCurveOID,
    HashAlgorithm,
    KeyFlags,
    PubKeyAlgorithm,
)
from pgpy.errors import PGPError
from structlog import get_logger

from registrar_trust.application.ports.clearsign import (
    ClearsignVerifierProtocol,
    PublicKey,
    SignatureCheck,
)
from registrar_trust.domain.errors.signature import InvalidPublicKeyError

logger = get_logger()

# PGPy raises a mix of these for data that is not what it claims to be
_PGP_DATA_ERRORS = (PGPError, ValueError, TypeError, NotImplementedError)


def generate_signing_key(
    name: str = "Registrar Approver",
    email: Optional[str] = None,
) -> PGPKey:
    """Generate an Ed25519 OpenPGP key able to sign approvals."""
    key = PGPKey.new(PubKeyAlgorithm.EdDSA, EllipticCurveOID.Ed25519)
    key.add_uid(
        PGPUID.new(name, email=email or ""),
        usage={KeyFlags.Sign, KeyFlags.Certify},
        hashes=[HashAlgorithm.SHA256, HashAlgorithm.SHA512],
    )
    return key


def public_key_armor(key: PGPKey) -> str:
    """Return the ASCII-armored public half of a key."""
    public = key if key.is_public else key.pubkey
    return str(public)


def key_fingerprint(key: PGPKey) -> str:
    """Return the fingerprint of a key as uppercase hex without spaces."""
    return str(key.fingerprint).replace(" ", "")


def clearsign(payload: bytes, key: PGPKey) -> bytes:
    """Produce an OpenPGP cleartext signed message for payload.

    Args:
        payload: UTF-8 text to sign.
        key: Unprotected secret key.

    Returns:
        The armored signed message as bytes.
    """
    message = PGPMessage.new(payload.decode("utf-8"), cleartext=True)
    message |= key.sign(message)
    return str(message).encode("utf-8")


def _key_ids(key: PGPKey) -> set[str]:
    return {key.fingerprint.keyid, *key.subkeys.keys()}


class OpenPGPClearsignVerifier(ClearsignVerifierProtocol):
    """Clearsign verification with OpenPGP keys."""

    def load_public_key(self, armored: str | bytes) -> PublicKey:
        """Load an ASCII-armored OpenPGP public key.

        A secret key block is accepted and reduced to its public half.

        Raises:
            InvalidPublicKeyError: If the material is not an armored
                OpenPGP key.
        """
        try:
            text = armored.decode("utf-8") if isinstance(armored, bytes) else armored
            key, _ = PGPKey.from_blob(text)
        except _PGP_DATA_ERRORS as exc:
            raise InvalidPublicKeyError(f"Unable to load public key: {exc}") from exc

        if not key.is_public:
            key = key.pubkey
        return PublicKey(key_id=key_fingerprint(key), key=key)

    def verify(self, blob: bytes, keys: Sequence[PublicKey]) -> SignatureCheck:
        if not keys:
            return SignatureCheck.invalid()

        try:
            message = PGPMessage.from_blob(blob.decode("utf-8"))
        except _PGP_DATA_ERRORS as exc:
            logger.debug("clearsign_message_malformed", error=str(exc))
            return SignatureCheck.invalid()

        if message.type != "cleartext" or not message.is_signed:
            logger.debug("clearsign_message_not_cleartext", message_type=message.type)
            return SignatureCheck.invalid()

        signers = message.signers
        for candidate in keys:
            if not _key_ids(candidate.key) & signers:
                continue
            try:
                verified = bool(candidate.key.verify(message))
            except _PGP_DATA_ERRORS as exc:
                logger.debug(
                    "clearsign_verify_failed", key_id=candidate.key_id, error=str(exc)
                )
                continue
            if verified:
                return SignatureCheck(
                    valid=True,
                    payload=str(message.message).encode("utf-8"),
                    key_id=candidate.key_id,
                )

        return SignatureCheck.invalid()
