"""Verifier configuration.

Defines how the verifier reaches the registrar and where its trust
anchors come from, with environment variable overrides.

Environment Variables:
- ENVIRONMENT: "production" (JSON logs) or "development" (default: production)
- REGISTRAR_API_URL: Registrar base URL (default: unset)
- REGISTRAR_API_TIMEOUT: Request timeout in seconds (default: 30.0)
- REGISTRAR_CLIENT_CERT: Client certificate for mutual TLS (default: unset)
- REGISTRAR_CLIENT_KEY: Key for the client certificate (default: unset)
- REGISTRAR_CA_BUNDLE: CA bundle for the registrar certificate (default: unset)
- TRUST_ANCHOR_FILES: Comma separated armored OpenPGP public key files (default: none)
- TRUST_CHAIN_MAX_DEPTH: Maximum delegation depth (default: 32)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from registrar_trust.domain.models.delegation_path import DEFAULT_MAX_DEPTH

DEFAULT_API_TIMEOUT = 30.0


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_optional_env(key: str) -> str | None:
    value = os.environ.get(key, "").strip()
    return value or None


def _get_list_env(key: str) -> tuple[str, ...]:
    value = os.environ.get(key, "")
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class VerifierConfig:
    """Configuration for a trust chain verifier.

    Attributes:
        environment: Logging environment, production or development.
        api_url: Registrar base URL. None when verifying a snapshot.
        api_timeout: HTTP request timeout in seconds.
        client_cert: Client certificate path for mutual TLS.
        client_key: Client key path, if not bundled with the certificate.
        ca_bundle: CA bundle path for the registrar's certificate.
        trust_anchor_files: Armored OpenPGP public key files pinned as trust anchors.
        max_depth: Maximum delegation depth before failing closed.
    """

    environment: str = "production"
    api_url: str | None = None
    api_timeout: float = DEFAULT_API_TIMEOUT
    client_cert: str | None = None
    client_key: str | None = None
    ca_bundle: str | None = None
    trust_anchor_files: tuple[str, ...] = field(default_factory=tuple)
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.environment not in ("production", "development"):
            raise ValueError(
                "environment must be production or development, "
                f"got {self.environment!r}"
            )
        if self.api_timeout <= 0:
            raise ValueError(f"api_timeout must be positive, got {self.api_timeout}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.client_key and not self.client_cert:
            raise ValueError("client_key requires client_cert")
        if self.api_url is not None and not self.api_url.startswith(
            ("http://", "https://")
        ):
            raise ValueError(f"api_url must be an http(s) URL, got {self.api_url!r}")

    @classmethod
    def from_environment(cls) -> "VerifierConfig":
        """Create config from environment variables with defaults.

        Returns:
            VerifierConfig with values from environment or defaults.
        """
        return cls(
            environment=os.environ.get("ENVIRONMENT", "production"),
            api_url=_get_optional_env("REGISTRAR_API_URL"),
            api_timeout=_get_float_env("REGISTRAR_API_TIMEOUT", DEFAULT_API_TIMEOUT),
            client_cert=_get_optional_env("REGISTRAR_CLIENT_CERT"),
            client_key=_get_optional_env("REGISTRAR_CLIENT_KEY"),
            ca_bundle=_get_optional_env("REGISTRAR_CA_BUNDLE"),
            trust_anchor_files=_get_list_env("TRUST_ANCHOR_FILES"),
            max_depth=_get_int_env("TRUST_CHAIN_MAX_DEPTH", DEFAULT_MAX_DEPTH),
        )


# Default config, no registrar and no anchors
DEFAULT_VERIFIER_CONFIG = VerifierConfig()
