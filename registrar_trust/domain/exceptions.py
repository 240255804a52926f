"""Base exception classes for the registrar-trust domain layer."""


class RegistrarTrustError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so that
    verification services can report any failure as a normal result
    instead of raising it.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
