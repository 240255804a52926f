"""
Infrastructure layer - Adapters for registrar-trust.

This layer contains:
- Adapters: registrar HTTP API object store, OpenPGP clearsign backend
- Stubs: in-memory object store with time travel
- Observability: structlog configuration and correlation ids

Dependencies: May import from application and domain layers.
"""
