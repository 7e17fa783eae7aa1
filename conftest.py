"""
Pytest configuration and fixtures.
"""
from types import SimpleNamespace

import pytest

from app.platform.rbac.constants import Role
from app.platform.rbac.principal import Principal


@pytest.fixture
def api_rf():
    """Return DRF API request factory."""
    from rest_framework.test import APIRequestFactory
    return APIRequestFactory()


@pytest.fixture
def make_user():
    """Build an authenticated user as the JWT authentication would (userId + role claims)."""
    def _make_user(user_id="u1", role=Role.REP):
        value = role.value if isinstance(role, Role) else role
        return SimpleNamespace(userId=user_id, id=user_id, role=value, is_authenticated=True)
    return _make_user


@pytest.fixture
def admin():
    return Principal(id="admin-1", role=Role.ADMIN)


@pytest.fixture
def manager():
    return Principal(id="manager-1", role=Role.MANAGER)


@pytest.fixture
def rep():
    return Principal(id="rep-1", role=Role.REP)


@pytest.fixture
def read_only():
    return Principal(id="viewer-1", role=Role.READ_ONLY)
