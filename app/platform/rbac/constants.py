"""
RBAC Constants - Role and Permission Definitions
Closed enumerations plus the role hierarchy and permission matrix tables.
"""

from enum import Enum
from types import MappingProxyType

from .exceptions import InvalidRole, UnknownPermission


class Role(str, Enum):
    """CRM workspace roles, declared in ascending privilege order."""
    READ_ONLY = "READ_ONLY"
    REP = "REP"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"

    @classmethod
    def coerce(cls, value) -> "Role":
        """Accept a Role or its string value; anything else is an InvalidRole."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRole(value) from None


class Permission(str, Enum):
    """Entity + operation scoped capabilities"""
    # User management
    USER_CREATE = "USER_CREATE"
    USER_READ = "USER_READ"
    USER_UPDATE = "USER_UPDATE"
    USER_DELETE = "USER_DELETE"

    # Contact management
    CONTACT_CREATE = "CONTACT_CREATE"
    CONTACT_READ = "CONTACT_READ"
    CONTACT_UPDATE = "CONTACT_UPDATE"
    CONTACT_DELETE = "CONTACT_DELETE"

    # Lead management
    LEAD_CREATE = "LEAD_CREATE"
    LEAD_READ = "LEAD_READ"
    LEAD_UPDATE = "LEAD_UPDATE"
    LEAD_DELETE = "LEAD_DELETE"

    # Deal management
    DEAL_CREATE = "DEAL_CREATE"
    DEAL_READ = "DEAL_READ"
    DEAL_UPDATE = "DEAL_UPDATE"
    DEAL_DELETE = "DEAL_DELETE"

    # Activity management
    ACTIVITY_CREATE = "ACTIVITY_CREATE"
    ACTIVITY_READ = "ACTIVITY_READ"
    ACTIVITY_UPDATE = "ACTIVITY_UPDATE"
    ACTIVITY_DELETE = "ACTIVITY_DELETE"

    # Reports and analytics
    REPORTS_READ = "REPORTS_READ"
    ANALYTICS_READ = "ANALYTICS_READ"

    # Import/Export
    IMPORT_DATA = "IMPORT_DATA"
    EXPORT_DATA = "EXPORT_DATA"

    # System settings
    SETTINGS_READ = "SETTINGS_READ"
    SETTINGS_UPDATE = "SETTINGS_UPDATE"

    @classmethod
    def coerce(cls, value) -> "Permission":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownPermission(value) from None


class Entities(str, Enum):
    """CRM record types that carry a CREATE/READ/UPDATE/DELETE permission set"""
    USER = "user"
    CONTACT = "contact"
    LEAD = "lead"
    DEAL = "deal"
    ACTIVITY = "activity"


class Actions(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


# Role Hierarchy (higher number = more privileged)
ROLE_HIERARCHY = MappingProxyType({
    Role.READ_ONLY: 0,
    Role.REP: 1,
    Role.MANAGER: 2,
    Role.ADMIN: 3,
})

# Roles at or above this rank are not restricted to records they own
OWNERSHIP_BYPASS_ROLE = Role.MANAGER

_ALL_ROLES = frozenset(Role)
_WRITERS = frozenset({Role.ADMIN, Role.MANAGER, Role.REP})
_MANAGERS = frozenset({Role.ADMIN, Role.MANAGER})
_ADMINS = frozenset({Role.ADMIN})


# Hand-authored per permission. Not derived from ROLE_HIERARCHY:
# REPORTS_READ is granted to READ_ONLY but not to REP.
PERMISSION_MATRIX = MappingProxyType({
    # User management
    Permission.USER_CREATE: _ADMINS,
    Permission.USER_READ: _ALL_ROLES,
    Permission.USER_UPDATE: _MANAGERS,
    Permission.USER_DELETE: _ADMINS,

    # Contact management
    Permission.CONTACT_CREATE: _WRITERS,
    Permission.CONTACT_READ: _ALL_ROLES,
    Permission.CONTACT_UPDATE: _WRITERS,
    Permission.CONTACT_DELETE: _MANAGERS,

    # Lead management
    Permission.LEAD_CREATE: _WRITERS,
    Permission.LEAD_READ: _ALL_ROLES,
    Permission.LEAD_UPDATE: _WRITERS,
    Permission.LEAD_DELETE: _MANAGERS,

    # Deal management
    Permission.DEAL_CREATE: _WRITERS,
    Permission.DEAL_READ: _ALL_ROLES,
    Permission.DEAL_UPDATE: _WRITERS,
    Permission.DEAL_DELETE: _MANAGERS,

    # Activity management
    Permission.ACTIVITY_CREATE: _WRITERS,
    Permission.ACTIVITY_READ: _ALL_ROLES,
    Permission.ACTIVITY_UPDATE: _WRITERS,
    Permission.ACTIVITY_DELETE: _MANAGERS,

    # Reports and analytics
    Permission.REPORTS_READ: frozenset({Role.ADMIN, Role.MANAGER, Role.READ_ONLY}),
    Permission.ANALYTICS_READ: _MANAGERS,

    # Import/Export
    Permission.IMPORT_DATA: _MANAGERS,
    Permission.EXPORT_DATA: _WRITERS,

    # System settings
    Permission.SETTINGS_READ: _ADMINS,
    Permission.SETTINGS_UPDATE: _ADMINS,
})


ROLE_DISPLAY_NAMES = MappingProxyType({
    Role.READ_ONLY: "Read Only",
    Role.REP: "Sales Rep",
    Role.MANAGER: "Manager",
    Role.ADMIN: "Admin",
})
