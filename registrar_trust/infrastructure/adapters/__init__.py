"""Infrastructure adapters for the registrar API and signature backend."""

from registrar_trust.infrastructure.adapters.openpgp_clearsign import (
    OpenPGPClearsignVerifier,
    clearsign,
)
from registrar_trust.infrastructure.adapters.registrar_api import (
    RegistrarAPIObjectStore,
)

__all__: list[str] = [
    "OpenPGPClearsignVerifier",
    "RegistrarAPIObjectStore",
    "clearsign",
]
