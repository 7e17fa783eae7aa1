"""
RBAC Mixins for CRM ViewSets
Provides reusable mixins for ViewSets and views
"""

import logging
from functools import reduce
from operator import or_
from typing import Optional, Tuple

from django.db.models import Q, QuerySet
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated
from rest_framework.response import Response

from app.utils.response import api_response

from .constants import Actions, Entities, OWNERSHIP_BYPASS_ROLE
from .permissions import DEFAULT_OWNER_FIELDS, get_record_owner_ids
from .principal import Principal, get_principal
from .utils import (
    can_access_resource,
    get_accessible_ids,
    has_permission,
    has_role_or_higher,
    permission_for,
)

logger = logging.getLogger(__name__)


def _safe_principal(request) -> Optional[Principal]:
    try:
        return get_principal(request)
    except NotAuthenticated:
        return None


class RBACPermissionMixin:
    """
    Base mixin for RBAC permission checking.

    Subclasses name their entity once; the CREATE/READ/UPDATE/DELETE
    permissions are derived from it.
    """

    # Override these in subclasses
    entity: Optional[Entities] = None
    owner_fields: Tuple[str, ...] = DEFAULT_OWNER_FIELDS

    def get_entity(self) -> Optional[Entities]:
        return self.entity

    def check_permission(self, request, action) -> bool:
        """
        Check the category-level permission for ``action`` on this view's entity.
        """
        principal = _safe_principal(request)
        if principal is None:
            logger.warning("Permission check failed: User not authenticated")
            return False

        permission = permission_for(self.get_entity(), action)
        has_perm = has_permission(principal.role, permission)

        if not has_perm:
            logger.info(
                f"Permission denied: user={principal.id}, role={principal.role.value}, "
                f"permission={permission.value}"
            )

        return has_perm

    def check_record_access(self, request, record) -> bool:
        """
        Check ownership access to a single record.
        """
        principal = _safe_principal(request)
        if principal is None:
            return False

        owner_ids = get_record_owner_ids(record, self.owner_fields)
        can_access = can_access_resource(principal.role, principal.id, owner_ids)

        if not can_access:
            logger.info(
                f"Record access denied: user={principal.id}, role={principal.role.value}, "
                f"record_id={getattr(record, 'id', None)}, entity={self.get_entity()}"
            )

        return can_access

    def filter_queryset_by_permissions(self, queryset: QuerySet, request) -> QuerySet:
        """
        Restrict a queryset to records the principal owns.
        MANAGER and ADMIN see everything; an OR is built across ``owner_fields``
        so records with several owner-like columns match on any of them.
        """
        principal = _safe_principal(request)
        if principal is None:
            return queryset.none()

        if has_role_or_higher(principal.role, OWNERSHIP_BYPASS_ROLE):
            return queryset

        conditions = reduce(or_, (Q(**{field: principal.id}) for field in self.owner_fields))
        return queryset.filter(conditions)

    def get_permission_denied_response(self, message: str = "Permission denied") -> Response:
        """Standard permission denied response."""
        return api_response(
            status_code=status.HTTP_403_FORBIDDEN,
            status="failure",
            data={},
            error_code="PERMISSION_DENIED",
            error_message=message,
        )


class RBACViewSetMixin(RBACPermissionMixin):
    """
    Mixin for ViewSets with RBAC integration.
    Gates the standard actions by permission and, for single records, by ownership.

    Single-record lookups go through the owner-scoped ``get_queryset``, so a
    record outside the caller's scope is a 404 from ``get_object`` rather than
    a 403. The ownership check still applies when a subclass widens ``get_queryset``.
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        return self.filter_queryset_by_permissions(queryset, self.request)

    def list(self, request, *args, **kwargs):
        if not self.check_permission(request, Actions.READ):
            return self.get_permission_denied_response("You don't have permission to view this list")
        return super().list(request, *args, **kwargs)

    def retrieve(self, request, *args, **kwargs):
        if not self.check_permission(request, Actions.READ):
            return self.get_permission_denied_response("You don't have permission to view this record")

        obj = self.get_object()
        if not self.check_record_access(request, obj):
            return self.get_permission_denied_response("You don't have access to this record")

        return super().retrieve(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        if not self.check_permission(request, Actions.CREATE):
            return self.get_permission_denied_response("You don't have permission to create records")
        return super().create(request, *args, **kwargs)

    def update(self, request, *args, **kwargs):
        if not self.check_permission(request, Actions.UPDATE):
            return self.get_permission_denied_response("You don't have permission to update records")

        obj = self.get_object()
        if not self.check_record_access(request, obj):
            return self.get_permission_denied_response("You don't have permission to edit this record")

        return super().update(request, *args, **kwargs)

    def partial_update(self, request, *args, **kwargs):
        if not self.check_permission(request, Actions.UPDATE):
            return self.get_permission_denied_response("You don't have permission to update records")

        obj = self.get_object()
        if not self.check_record_access(request, obj):
            return self.get_permission_denied_response("You don't have permission to edit this record")

        return super().partial_update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        if not self.check_permission(request, Actions.DELETE):
            return self.get_permission_denied_response("You don't have permission to delete records")

        obj = self.get_object()
        if not self.check_record_access(request, obj):
            return self.get_permission_denied_response("You don't have permission to delete this record")

        return super().destroy(request, *args, **kwargs)


class RBACQuerySetMixin:
    """
    Mixin for filtering querysets by accessible owner ids.
    Can be used with any view or manager.
    """

    @staticmethod
    def filter_by_accessible_owners(queryset: QuerySet, principal: Principal, owner_ids, field: str = "owner_id") -> QuerySet:
        """
        Filter ``queryset`` to ``field__in`` the owner ids the principal may see.
        ``owner_ids`` is the universe of candidate owners (usually every user id).
        """
        accessible = get_accessible_ids(principal.role, principal.id, owner_ids)
        return queryset.filter(**{f"{field}__in": list(accessible)})
