"""Clearsign verification port definition.

Defines the abstract interface for the signature primitive: loading
public keys and checking that a clearsigned blob was produced by one of a
set of keys. The verifier only ever asks about origin; deciding whether
the signed content is acceptable is the caller's job.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PublicKey:
    """A loaded public key.

    Attributes:
        key_id: Stable identifier derived from the key material.
        key: Backend-specific key object.
    """

    key_id: str
    key: Any


@dataclass(frozen=True)
class SignatureCheck:
    """Result of checking a clearsigned blob.

    Attributes:
        valid: True if a key in the set produced the signature.
        payload: Signed content, empty unless valid.
        key_id: Identifier of the key that matched, if any.
    """

    valid: bool
    payload: bytes = b""
    key_id: str | None = None

    @classmethod
    def invalid(cls) -> "SignatureCheck":
        return cls(valid=False)


class ClearsignVerifierProtocol(ABC):
    """Abstract protocol for clearsigned signature verification."""

    @abstractmethod
    def load_public_key(self, armored: str | bytes) -> PublicKey:
        """Load a public key from its armored text form.

        Args:
            armored: Armored public key material.

        Returns:
            The loaded key.

        Raises:
            InvalidPublicKeyError: If the material is not a usable key.
        """
        ...

    @abstractmethod
    def verify(self, blob: bytes, keys: Sequence[PublicKey]) -> SignatureCheck:
        """Check whether blob was clearsigned by any of keys.

        A malformed blob or an empty key list is not an error; the check
        is simply invalid.

        Args:
            blob: The clearsigned message.
            keys: Candidate signing keys.

        Returns:
            SignatureCheck with the signed payload when valid.
        """
        ...
