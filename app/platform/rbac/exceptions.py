"""
RBAC programming errors.

These signal a role or permission outside the closed enumerations, or a broken
permission matrix. They are never converted into an allow or a deny.
"""


class RBACError(Exception):
    """Base class for RBAC configuration and programming errors."""


class InvalidRole(RBACError, ValueError):
    def __init__(self, role):
        self.role = role
        super().__init__(f"Unknown role: {role!r}")


class UnknownPermission(RBACError, ValueError):
    def __init__(self, permission):
        self.permission = permission
        super().__init__(f"Unknown permission: {permission!r}")


class PermissionMatrixError(RBACError):
    """The permission matrix does not cover every permission with a non-empty role set."""
