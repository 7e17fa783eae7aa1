"""
DRF Permission Classes for RBAC
Route-layer gates built on the pure decision functions in utils.
"""

import logging

from rest_framework import permissions
from rest_framework.exceptions import PermissionDenied

from .constants import OWNERSHIP_BYPASS_ROLE, Permission
from .principal import Principal, get_principal
from .utils import can_access_resource, has_permission, has_role_or_higher

logger = logging.getLogger(__name__)

DEFAULT_OWNER_FIELDS = ("owner_id",)


def require_permission(principal: Principal, permission) -> Principal:
    """
    Raise PermissionDenied unless the principal holds the permission.
    Returns the principal so handlers can write ``principal = require_permission(...)``.
    """
    if not has_permission(principal.role, permission):
        perm_code = Permission.coerce(permission).value
        logger.info(
            f"Permission denied: user={principal.id}, role={principal.role.value}, permission={perm_code}"
        )
        raise PermissionDenied("Insufficient permissions")
    return principal


def require_resource_access(principal: Principal, resource_owner_id) -> Principal:
    """Raise PermissionDenied unless the principal may act on a record with this owner."""
    if not can_access_resource(principal.role, principal.id, resource_owner_id):
        logger.info(
            f"Record access denied: user={principal.id}, role={principal.role.value}, owner={resource_owner_id}"
        )
        raise PermissionDenied("You don't have access to this record")
    return principal


def get_record_owner_ids(obj, owner_fields=DEFAULT_OWNER_FIELDS) -> list:
    """Collect the candidate owner ids of a record from the named attributes."""
    return [getattr(obj, field, None) for field in owner_fields]


def _required_permission(request, view):
    """
    A view declares either ``required_permission`` (one gate for every action)
    or ``required_permissions`` (a dict keyed by action name or HTTP method).
    """
    required = getattr(view, "required_permission", None)
    if required is not None:
        return required

    mapping = getattr(view, "required_permissions", None) or {}
    action = getattr(view, "action", None)
    if action and action in mapping:
        return mapping[action]

    method = getattr(request, "method", None)
    if method:
        return mapping.get(method.upper())
    return None


class HasCRMPermission(permissions.BasePermission):
    """
    Category-level gate. Views without a permission for the current action or
    method are denied.

    Usage:
        permission_classes = [HasCRMPermission]
        required_permission = Permission.CONTACT_CREATE
    """

    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        required = _required_permission(request, view)
        if required is None:
            logger.warning(
                f"No permission declared for view={view.__class__.__name__}, "
                f"action={getattr(view, 'action', None)}, method={getattr(request, 'method', None)}; denying"
            )
            return False

        principal = get_principal(request)
        allowed = has_permission(principal.role, required)
        if not allowed:
            logger.info(
                f"Permission denied: user={principal.id}, role={principal.role.value}, "
                f"permission={Permission.coerce(required).value}, view={view.__class__.__name__}"
            )
        return allowed


class CanAccessRecord(permissions.BasePermission):
    """
    Object-level ownership gate. Reads ``view.owner_fields`` to find the owner
    attributes of the record (defaults to ``owner_id``).

    Usage:
        permission_classes = [HasCRMPermission, CanAccessRecord]
        owner_fields = ("created_by_id", "assignee_id")
    """

    message = "You don't have access to this record."

    def has_permission(self, request, view):
        # List/create endpoints rely on queryset scoping
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        principal = get_principal(request)
        owner_fields = getattr(view, "owner_fields", None) or DEFAULT_OWNER_FIELDS
        owner_ids = get_record_owner_ids(obj, owner_fields)

        allowed = can_access_resource(principal.role, principal.id, owner_ids)
        if not allowed:
            logger.info(
                f"Record access denied: user={principal.id}, role={principal.role.value}, "
                f"record_id={getattr(obj, 'id', None)}"
            )
        return allowed


class IsManagerOrAbove(permissions.BasePermission):
    """Check if user ranks at MANAGER or higher."""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return has_role_or_higher(get_principal(request).role, OWNERSHIP_BYPASS_ROLE)
