"""Object store errors.

Raised by object store adapters when a registrar object cannot be
retrieved. Verification services never retry these; they are reported
verbatim in the verification result.
"""

from __future__ import annotations

from registrar_trust.domain.exceptions import RegistrarTrustError


class ObjectStoreError(RegistrarTrustError):
    """Base class for object store failures.

    Raised when:
    - The backing service is unreachable or returns an error response
    - A response cannot be decoded into a registrar export
    """

    pass


class ObjectNotFoundError(ObjectStoreError):
    """The requested object does not exist (at the requested time).

    Attributes:
        object_type: Registrar object type that was requested.
        object_id: Identifier that was requested.
        at_time: Unix timestamp of a time-travel lookup, None otherwise.
    """

    def __init__(
        self,
        object_type: str,
        object_id: int,
        at_time: int | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            object_type: Registrar object type that was requested.
            object_id: Identifier that was requested.
            at_time: Unix timestamp of a time-travel lookup, if any.
        """
        self.object_type = object_type
        self.object_id = object_id
        self.at_time = at_time
        if at_time is None:
            message = f"{object_type} {object_id} not found"
        else:
            message = f"{object_type} {object_id} not found at t={at_time}"
        super().__init__(message)


class UnexpectedObjectTypeError(ObjectStoreError):
    """The store returned an object of a different kind than requested."""

    def __init__(self, expected: str, actual: str) -> None:
        """Initialize the error.

        Args:
            expected: Object type that was requested.
            actual: Object type that was returned.
        """
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Unable to parse object: expected {expected}, got {actual}"
        )
