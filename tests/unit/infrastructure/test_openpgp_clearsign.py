"""Tests for the OpenPGP clearsign adapter.

Keys are real Ed25519 OpenPGP keys generated with PGPy, so every check
exercises the same armored formats the registrar stores and signs with.
"""

import pytest
from pgpy import PGPKey, PGPMessage

from registrar_trust.domain.errors import InvalidPublicKeyError
from registrar_trust.infrastructure.adapters.openpgp_clearsign import (
    OpenPGPClearsignVerifier,
    clearsign,
    generate_signing_key,
    key_fingerprint,
    public_key_armor,
)

PAYLOAD = b'{"ApprovalID":12,"Action":"approve","ObjectType":"domain"}'


@pytest.fixture(scope="module")
def alice() -> PGPKey:
    return generate_signing_key("Alice", "alice@registrar.example")


@pytest.fixture(scope="module")
def bob() -> PGPKey:
    return generate_signing_key("Bob")


@pytest.fixture
def verifier() -> OpenPGPClearsignVerifier:
    return OpenPGPClearsignVerifier()


class TestClearsign:
    """Tests for the signing helpers."""

    def test_cleartext_armor(self, alice: PGPKey) -> None:
        blob = clearsign(PAYLOAD, alice)

        assert blob.startswith(b"-----BEGIN PGP SIGNED MESSAGE-----")
        assert PAYLOAD in blob
        assert b"-----BEGIN PGP SIGNATURE-----" in blob

    def test_public_key_armor_has_no_secret(self, alice: PGPKey) -> None:
        armored = public_key_armor(alice)

        assert armored.startswith("-----BEGIN PGP PUBLIC KEY BLOCK-----")
        assert "PRIVATE" not in armored

    def test_fingerprint_is_compact(self, alice: PGPKey) -> None:
        fingerprint = key_fingerprint(alice)

        assert " " not in fingerprint
        assert fingerprint.endswith(alice.fingerprint.keyid)


class TestLoadPublicKey:
    """Tests for load_public_key()."""

    def test_load_from_text(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey
    ) -> None:
        key = verifier.load_public_key(public_key_armor(alice))

        assert key.key_id == key_fingerprint(alice)
        assert key.key.is_public

    def test_load_from_bytes(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey
    ) -> None:
        key = verifier.load_public_key(public_key_armor(alice).encode())
        assert key.key_id == key_fingerprint(alice)

    def test_secret_key_reduced_to_public(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey
    ) -> None:
        key = verifier.load_public_key(str(alice))

        assert key.key.is_public
        assert key.key_id == key_fingerprint(alice)

    @pytest.mark.parametrize(
        "material",
        [
            "",
            "not a key",
            "-----BEGIN PUBLIC KEY-----\nMCowBQYDK2VwAyEA\n-----END PUBLIC KEY-----",
            b"\xff\xfe",
        ],
    )
    def test_not_an_openpgp_key(
        self, verifier: OpenPGPClearsignVerifier, material: str | bytes
    ) -> None:
        with pytest.raises(InvalidPublicKeyError, match="Unable to load public key"):
            verifier.load_public_key(material)


class TestVerify:
    """Tests for verify()."""

    def test_valid_signature_returns_payload(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey
    ) -> None:
        key = verifier.load_public_key(public_key_armor(alice))

        check = verifier.verify(clearsign(PAYLOAD, alice), [key])

        assert check.valid
        assert check.payload == PAYLOAD
        assert check.key_id == key.key_id

    def test_matches_any_key(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey, bob: PGPKey
    ) -> None:
        keys = [
            verifier.load_public_key(public_key_armor(alice)),
            verifier.load_public_key(public_key_armor(bob)),
        ]

        check = verifier.verify(clearsign(PAYLOAD, bob), keys)

        assert check.valid
        assert check.key_id == key_fingerprint(bob)

    def test_unknown_signer(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey, bob: PGPKey
    ) -> None:
        key = verifier.load_public_key(public_key_armor(alice))

        check = verifier.verify(clearsign(PAYLOAD, bob), [key])

        assert not check.valid
        assert check.payload == b""
        assert check.key_id is None

    def test_tampered_payload(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey
    ) -> None:
        key = verifier.load_public_key(public_key_armor(alice))
        blob = clearsign(PAYLOAD, alice).replace(b'"approve"', b'"decline"')

        assert not verifier.verify(blob, [key]).valid

    def test_no_keys(self, verifier: OpenPGPClearsignVerifier, alice: PGPKey) -> None:
        assert not verifier.verify(clearsign(PAYLOAD, alice), []).valid

    @pytest.mark.parametrize(
        "blob",
        [
            b"",
            b"not signed at all",
            b"-----BEGIN PGP SIGNED MESSAGE-----\nHash: SHA256\n\n{}\n",
            b"\xff\xfe",
        ],
    )
    def test_malformed_blob(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey, blob: bytes
    ) -> None:
        key = verifier.load_public_key(public_key_armor(alice))
        assert not verifier.verify(blob, [key]).valid

    def test_signed_message_that_is_not_cleartext(
        self, verifier: OpenPGPClearsignVerifier, alice: PGPKey
    ) -> None:
        key = verifier.load_public_key(public_key_armor(alice))
        message = PGPMessage.new(PAYLOAD.decode())
        message |= alice.sign(message)

        check = verifier.verify(str(message).encode(), [key])

        assert not check.valid
