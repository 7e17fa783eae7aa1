"""
Role-Based Access Control (RBAC) for the CRM
Role hierarchy, permission matrix and ownership-access rules shared by every API route.
"""

from .constants import (
    Role,
    Permission,
    Entities,
    Actions,
    ROLE_HIERARCHY,
    PERMISSION_MATRIX,
)
from .exceptions import (
    RBACError,
    InvalidRole,
    UnknownPermission,
    PermissionMatrixError,
)
from .utils import (
    rank,
    has_role_or_higher,
    has_permission,
    can_access_resource,
    get_accessible_ids,
)

__all__ = [
    # Constants
    "Role",
    "Permission",
    "Entities",
    "Actions",
    "ROLE_HIERARCHY",
    "PERMISSION_MATRIX",
    # Errors
    "RBACError",
    "InvalidRole",
    "UnknownPermission",
    "PermissionMatrixError",
    # Decision functions
    "rank",
    "has_role_or_higher",
    "has_permission",
    "can_access_resource",
    "get_accessible_ids",
]

# DRF integration imports Django settings; import it where needed:
#   from app.platform.rbac.principal import Principal, get_principal
#   from app.platform.rbac.permissions import HasCRMPermission, CanAccessRecord, require_permission
#   from app.platform.rbac.mixins import RBACViewSetMixin
