"""Configuration module for registrar-trust.

Available Configurations:
- VerifierConfig: Registrar access, trust anchors and delegation bound
"""

from registrar_trust.config.verifier_config import (
    DEFAULT_VERIFIER_CONFIG,
    VerifierConfig,
)

__all__ = [
    "DEFAULT_VERIFIER_CONFIG",
    "VerifierConfig",
]
