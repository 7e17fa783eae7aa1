"""
RBAC Helper Functions
User-management rules layered on the role hierarchy and permission matrix.
"""

from typing import FrozenSet

from .constants import OWNERSHIP_BYPASS_ROLE, Permission, Role
from .principal import Principal
from .utils import has_permission, has_role_or_higher


def _is_self(principal: Principal, target_id) -> bool:
    return target_id is not None and str(target_id) == principal.id


def can_view_user(principal: Principal, target_id) -> bool:
    """Managers and admins can view any user profile; others only their own."""
    if not has_permission(principal.role, Permission.USER_READ):
        return False
    return has_role_or_higher(principal.role, OWNERSHIP_BYPASS_ROLE) or _is_self(principal, target_id)


def can_update_user(principal: Principal, target_id, target_role) -> bool:
    """
    Requires USER_UPDATE. Admins can update anyone, managers can update
    non-admins and themselves.
    """
    if not has_permission(principal.role, Permission.USER_UPDATE):
        return False
    if _is_self(principal, target_id):
        return True
    if principal.role == Role.ADMIN:
        return True
    if principal.role == Role.MANAGER:
        return Role.coerce(target_role) != Role.ADMIN
    return False


def can_change_role(principal: Principal, target_id) -> bool:
    """Only admins change roles, and never their own."""
    return principal.role == Role.ADMIN and not _is_self(principal, target_id)


def can_change_active_status(principal: Principal, target_id, is_active: bool) -> bool:
    """Only admins toggle active status, and never to deactivate themselves."""
    if principal.role != Role.ADMIN:
        return False
    return is_active or not _is_self(principal, target_id)


def can_delete_user(principal: Principal, target_id) -> bool:
    """Needs USER_DELETE; nobody can delete themselves."""
    return has_permission(principal.role, Permission.USER_DELETE) and not _is_self(principal, target_id)


def assignable_roles(principal: Principal) -> FrozenSet[Role]:
    """Roles this principal may grant to other users."""
    if principal.role == Role.ADMIN:
        return frozenset(Role)
    return frozenset()
