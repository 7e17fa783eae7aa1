"""
Tests for DRF permission classes and the raising guards.
"""
import logging
from types import SimpleNamespace

import pytest
from rest_framework.exceptions import PermissionDenied

from app.platform.rbac.constants import Permission, Role
from app.platform.rbac.exceptions import UnknownPermission
from app.platform.rbac.permissions import (
    CanAccessRecord,
    HasCRMPermission,
    IsManagerOrAbove,
    get_record_owner_ids,
    require_permission,
    require_resource_access,
)


@pytest.fixture
def make_request(make_user):
    def _make_request(role=Role.REP, user_id="u1", method="GET", authenticated=True):
        user = make_user(user_id, role) if authenticated else SimpleNamespace(is_authenticated=False)
        return SimpleNamespace(user=user, method=method)
    return _make_request


def make_view(**attrs):
    return SimpleNamespace(**attrs)


class TestRequirePermission:

    def test_returns_principal_when_granted(self, admin):
        assert require_permission(admin, Permission.USER_CREATE) is admin

    def test_raises_permission_denied(self, rep, caplog):
        with caplog.at_level(logging.INFO, logger="app.platform.rbac.permissions"):
            with pytest.raises(PermissionDenied):
                require_permission(rep, Permission.USER_CREATE)
        assert "permission=USER_CREATE" in caplog.text
        assert "user=rep-1" in caplog.text

    def test_unknown_permission_is_not_converted_to_denial(self, admin):
        with pytest.raises(UnknownPermission):
            require_permission(admin, "CONTACT_MERGE")


class TestRequireResourceAccess:

    def test_owner_passes(self, rep):
        assert require_resource_access(rep, rep.id) is rep

    def test_non_owner_denied(self, rep):
        with pytest.raises(PermissionDenied):
            require_resource_access(rep, "someone-else")

    def test_manager_passes_for_unowned(self, manager):
        assert require_resource_access(manager, None) is manager


class TestHasCRMPermission:

    def test_unauthenticated_denied(self, make_request):
        request = make_request(authenticated=False)
        view = make_view(required_permission=Permission.CONTACT_READ)
        assert HasCRMPermission().has_permission(request, view) is False

    def test_single_required_permission(self, make_request):
        view = make_view(required_permission=Permission.CONTACT_CREATE)
        assert HasCRMPermission().has_permission(make_request(Role.REP), view) is True
        assert HasCRMPermission().has_permission(make_request(Role.READ_ONLY), view) is False

    def test_permission_by_action(self, make_request):
        view = make_view(
            action="destroy",
            required_permissions={"list": Permission.DEAL_READ, "destroy": Permission.DEAL_DELETE},
        )
        assert HasCRMPermission().has_permission(make_request(Role.REP), view) is False
        assert HasCRMPermission().has_permission(make_request(Role.MANAGER), view) is True

    def test_permission_by_http_method(self, make_request):
        view = make_view(required_permissions={"POST": Permission.IMPORT_DATA})
        assert HasCRMPermission().has_permission(make_request(Role.REP, method="post"), view) is False
        assert HasCRMPermission().has_permission(make_request(Role.MANAGER, method="POST"), view) is True

    def test_no_declared_permission_denies(self, make_request):
        assert HasCRMPermission().has_permission(make_request(Role.ADMIN), make_view()) is False

    def test_unmapped_action_denies(self, make_request):
        view = make_view(action="destroy", required_permissions={"list": Permission.DEAL_READ})
        request = make_request(Role.READ_ONLY, method="DELETE")
        assert HasCRMPermission().has_permission(request, view) is False

    def test_unmapped_method_denies(self, make_request):
        view = make_view(required_permissions={"GET": Permission.DEAL_READ})
        assert HasCRMPermission().has_permission(make_request(Role.ADMIN, method="DELETE"), view) is False

    def test_reports_asymmetry_through_drf(self, make_request):
        view = make_view(required_permission=Permission.REPORTS_READ)
        assert HasCRMPermission().has_permission(make_request(Role.READ_ONLY), view) is True
        assert HasCRMPermission().has_permission(make_request(Role.REP), view) is False


class TestCanAccessRecord:

    def test_owner_field_default(self, make_request):
        record = SimpleNamespace(id=1, owner_id="u1")
        permission = CanAccessRecord()
        assert permission.has_object_permission(make_request(Role.REP, "u1"), make_view(), record) is True
        assert permission.has_object_permission(make_request(Role.REP, "u2"), make_view(), record) is False

    def test_activity_owner_fields(self, make_request):
        activity = SimpleNamespace(id=7, created_by_id="u1", assignee_id="u2")
        view = make_view(owner_fields=("created_by_id", "assignee_id"))
        permission = CanAccessRecord()
        assert permission.has_object_permission(make_request(Role.REP, "u2"), view, activity) is True
        assert permission.has_object_permission(make_request(Role.REP, "u3"), view, activity) is False

    def test_unowned_record(self, make_request):
        record = SimpleNamespace(id=1, owner_id=None)
        permission = CanAccessRecord()
        assert permission.has_object_permission(make_request(Role.REP), make_view(), record) is False
        assert permission.has_object_permission(make_request(Role.ADMIN), make_view(), record) is True

    def test_list_level_requires_authentication(self, make_request):
        permission = CanAccessRecord()
        assert permission.has_permission(make_request(), make_view()) is True
        assert permission.has_permission(make_request(authenticated=False), make_view()) is False


class TestIsManagerOrAbove:

    @pytest.mark.parametrize("role,expected", [
        (Role.ADMIN, True),
        (Role.MANAGER, True),
        (Role.REP, False),
        (Role.READ_ONLY, False),
    ])
    def test_rank_gate(self, make_request, role, expected):
        assert IsManagerOrAbove().has_permission(make_request(role), make_view()) is expected


def test_get_record_owner_ids_missing_attribute():
    record = SimpleNamespace(owner_id="u1")
    assert get_record_owner_ids(record, ("owner_id", "assignee_id")) == ["u1", None]
