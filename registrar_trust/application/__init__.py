"""
Application layer - Verification services and ports for registrar-trust.

This layer contains:
- Ports: abstract interfaces for the object store and signature backend
- DTOs: registrar export documents, attestations and verification results
- Services: key sets and the trust chain verifier

Dependencies: May import from domain layer only.
"""
