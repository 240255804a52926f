"""Stub implementations of application ports for tests and offline use."""

from registrar_trust.infrastructure.stubs.object_store_stub import InMemoryObjectStore

__all__: list[str] = ["InMemoryObjectStore"]
