"""
RBAC API
Read-only endpoints exposing the caller's grants and the permission matrix.
"""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from app.utils.response import api_response

from .constants import OWNERSHIP_BYPASS_ROLE, PERMISSION_MATRIX, Permission, ROLE_HIERARCHY
from .helpers import assignable_roles
from .permissions import HasCRMPermission
from .principal import get_principal
from .serializers import PermissionMatrixSerializer, PrincipalPermissionsSerializer
from .utils import get_role_permissions, has_role_or_higher, rank, sorted_roles

logger = logging.getLogger(__name__)


class MyPermissionsView(APIView):
    """
    GET /api/v1/rbac/me/
    Role and granted permissions of the authenticated principal.
    Used by clients to decide which menus and actions to show.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["RBAC"],
        summary="Get my role and permissions",
        responses={200: PrincipalPermissionsSerializer},
    )
    def get(self, request):
        principal = get_principal(request)

        data = {
            "userId": principal.id,
            "role": principal.role.value,
            "rank": rank(principal.role),
            "permissions": sorted(p.value for p in get_role_permissions(principal.role)),
            "accessAllRecords": has_role_or_higher(principal.role, OWNERSHIP_BYPASS_ROLE),
            "assignableRoles": [r.value for r in sorted_roles(assignable_roles(principal))],
        }
        return api_response(
            status_code=status.HTTP_200_OK,
            status="success",
            data=PrincipalPermissionsSerializer(data).data,
        )


class PermissionMatrixView(APIView):
    """
    GET /api/v1/rbac/matrix/
    Full role hierarchy and permission matrix. Admin settings screen only.
    """
    permission_classes = [HasCRMPermission]
    required_permission = Permission.SETTINGS_READ

    @extend_schema(
        tags=["RBAC"],
        summary="Get the permission matrix",
        responses={200: PermissionMatrixSerializer},
    )
    def get(self, request):
        data = {
            "hierarchy": {role.value: level for role, level in ROLE_HIERARCHY.items()},
            "permissions": {
                permission.value: [r.value for r in sorted_roles(roles, descending=True)]
                for permission, roles in PERMISSION_MATRIX.items()
            },
        }
        logger.debug(f"Permission matrix served to user={get_principal(request).id}")
        return api_response(
            status_code=status.HTTP_200_OK,
            status="success",
            data=PermissionMatrixSerializer(data).data,
        )
