"""Fixtures for endpoint tests: an authenticated caller and mocked services."""

from unittest.mock import MagicMock

import pytest

from app.core.dependencies import get_current_db_user
from app.main import app


@pytest.fixture
def authenticated(user):
    """Skip token verification and act as ``user``."""
    app.dependency_overrides[get_current_db_user] = lambda: user
    return user


@pytest.fixture
def override_service():
    """Install a mocked service for a dependency factory and return it."""
    def _override(factory, service=None):
        service = service or MagicMock()
        app.dependency_overrides[factory] = lambda: service
        return service
    return _override
