"""
Pytest configuration and shared fixtures for registrar-trust tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Signed histories are built with tests.helpers.RegistrarWorld, never by
  hand-writing signatures
"""

import pytest

from tests.helpers import RegistrarWorld


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from registrar_trust import __version__

    return __version__


@pytest.fixture
def world() -> RegistrarWorld:
    """A fresh registrar history with one pinned trust anchor."""
    return RegistrarWorld()
