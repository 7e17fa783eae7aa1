"""
Tests for the permission matrix: exhaustiveness, authored grants and lookups.
"""
from types import MappingProxyType

import pytest

from app.platform.rbac.constants import PERMISSION_MATRIX, Permission, Role
from app.platform.rbac.exceptions import InvalidRole, PermissionMatrixError, UnknownPermission
from app.platform.rbac.utils import (
    get_role_permissions,
    has_permission,
    permission_for,
    validate_permission_matrix,
)

ALL = set(Role)
WRITERS = {Role.ADMIN, Role.MANAGER, Role.REP}
MANAGERS = {Role.ADMIN, Role.MANAGER}
ADMINS = {Role.ADMIN}

EXPECTED_MATRIX = {
    "USER_CREATE": ADMINS,
    "USER_READ": ALL,
    "USER_UPDATE": MANAGERS,
    "USER_DELETE": ADMINS,
    "REPORTS_READ": {Role.ADMIN, Role.MANAGER, Role.READ_ONLY},
    "ANALYTICS_READ": MANAGERS,
    "IMPORT_DATA": MANAGERS,
    "EXPORT_DATA": WRITERS,
    "SETTINGS_READ": ADMINS,
    "SETTINGS_UPDATE": ADMINS,
}
for _entity in ("CONTACT", "LEAD", "DEAL", "ACTIVITY"):
    EXPECTED_MATRIX[f"{_entity}_CREATE"] = WRITERS
    EXPECTED_MATRIX[f"{_entity}_READ"] = ALL
    EXPECTED_MATRIX[f"{_entity}_UPDATE"] = WRITERS
    EXPECTED_MATRIX[f"{_entity}_DELETE"] = MANAGERS


class TestExhaustiveness:

    @pytest.mark.parametrize("permission", list(Permission))
    def test_every_permission_has_non_empty_role_set(self, permission):
        assert permission in PERMISSION_MATRIX
        assert len(PERMISSION_MATRIX[permission]) > 0

    def test_no_keys_outside_the_enum(self):
        assert set(PERMISSION_MATRIX) == set(Permission)

    def test_matrix_matches_authored_table(self):
        assert {p.value: set(roles) for p, roles in PERMISSION_MATRIX.items()} == EXPECTED_MATRIX

    def test_shipped_matrix_validates(self):
        validate_permission_matrix()

    def test_missing_permission_is_reported(self):
        broken = dict(PERMISSION_MATRIX)
        del broken[Permission.SETTINGS_UPDATE]
        with pytest.raises(PermissionMatrixError, match="SETTINGS_UPDATE: missing"):
            validate_permission_matrix(broken)

    def test_empty_role_set_is_reported(self):
        broken = dict(PERMISSION_MATRIX)
        broken[Permission.LEAD_DELETE] = frozenset()
        with pytest.raises(PermissionMatrixError, match="LEAD_DELETE: empty role set"):
            validate_permission_matrix(broken)

    def test_string_roles_are_reported(self):
        broken = dict(PERMISSION_MATRIX)
        broken[Permission.DEAL_READ] = frozenset({"ADMIN"})
        with pytest.raises(PermissionMatrixError, match="DEAL_READ: contains unknown roles"):
            validate_permission_matrix(broken)

    def test_matrix_cannot_be_mutated(self):
        assert isinstance(PERMISSION_MATRIX, MappingProxyType)
        with pytest.raises(TypeError):
            PERMISSION_MATRIX[Permission.USER_CREATE] = frozenset(Role)
        assert all(isinstance(roles, frozenset) for roles in PERMISSION_MATRIX.values())


class TestHasPermission:

    def test_admin_can_create_users(self):
        assert has_permission(Role.ADMIN, Permission.USER_CREATE) is True

    def test_rep_cannot_create_users(self):
        assert has_permission(Role.REP, Permission.USER_CREATE) is False

    @pytest.mark.parametrize("role", list(Role))
    def test_every_role_reads_contacts(self, role):
        assert has_permission(role, Permission.CONTACT_READ) is True

    def test_read_only_cannot_create_contacts(self):
        assert has_permission(Role.READ_ONLY, Permission.CONTACT_CREATE) is False

    def test_reports_read_is_not_rank_monotonic(self):
        assert has_permission(Role.READ_ONLY, Permission.REPORTS_READ) is True
        assert has_permission(Role.REP, Permission.REPORTS_READ) is False

    @pytest.mark.parametrize("entity", ["CONTACT", "LEAD", "DEAL", "ACTIVITY"])
    def test_reps_cannot_delete_records(self, entity):
        assert has_permission(Role.REP, f"{entity}_DELETE") is False
        assert has_permission(Role.MANAGER, f"{entity}_DELETE") is True

    def test_only_admin_reads_settings(self):
        granted = {r for r in Role if has_permission(r, Permission.SETTINGS_READ)}
        assert granted == {Role.ADMIN}

    def test_string_inputs(self):
        assert has_permission("MANAGER", "IMPORT_DATA") is True

    def test_unknown_permission_raises(self):
        with pytest.raises(UnknownPermission) as exc_info:
            has_permission(Role.ADMIN, "CONTACT_ARCHIVE")
        assert exc_info.value.permission == "CONTACT_ARCHIVE"

    def test_unknown_permission_is_not_a_silent_deny(self):
        with pytest.raises(UnknownPermission):
            has_permission(Role.READ_ONLY, "NOT_A_PERMISSION")

    def test_invalid_role_raises(self):
        with pytest.raises(InvalidRole):
            has_permission("GUEST", Permission.CONTACT_READ)


class TestRolePermissions:

    def test_admin_holds_everything(self):
        assert get_role_permissions(Role.ADMIN) == frozenset(Permission)

    def test_rep_permissions(self):
        granted = get_role_permissions(Role.REP)
        assert Permission.EXPORT_DATA in granted
        assert Permission.REPORTS_READ not in granted
        assert Permission.USER_UPDATE not in granted

    def test_read_only_permissions(self):
        expected = {
            Permission.USER_READ,
            Permission.CONTACT_READ,
            Permission.LEAD_READ,
            Permission.DEAL_READ,
            Permission.ACTIVITY_READ,
            Permission.REPORTS_READ,
        }
        assert get_role_permissions("READ_ONLY") == expected


class TestPermissionFor:

    @pytest.mark.parametrize("entity,action,expected", [
        ("contact", "create", Permission.CONTACT_CREATE),
        ("lead", "read", Permission.LEAD_READ),
        ("deal", "update", Permission.DEAL_UPDATE),
        ("activity", "delete", Permission.ACTIVITY_DELETE),
        ("user", "delete", Permission.USER_DELETE),
    ])
    def test_resolves_entity_action(self, entity, action, expected):
        assert permission_for(entity, action) is expected

    def test_unknown_entity(self):
        with pytest.raises(UnknownPermission):
            permission_for("invoice", "read")

    def test_unknown_action(self):
        with pytest.raises(UnknownPermission):
            permission_for("contact", "archive")
