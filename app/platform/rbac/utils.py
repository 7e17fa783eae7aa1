"""
RBAC Utility Functions
Pure decision primitives over the role hierarchy and permission matrix.

Nothing here performs I/O or touches shared mutable state; every function is
safe to call concurrently from any request thread.
"""

from typing import Collection, FrozenSet, Iterable, Union

from .constants import (
    Actions,
    Entities,
    OWNERSHIP_BYPASS_ROLE,
    PERMISSION_MATRIX,
    Permission,
    ROLE_HIERARCHY,
    Role,
)
from .exceptions import PermissionMatrixError, UnknownPermission

RoleLike = Union[Role, str]
PermissionLike = Union[Permission, str]

_OWNER_COLLECTIONS = (list, tuple, set, frozenset)


def rank(role: RoleLike) -> int:
    """Position of a role in the hierarchy (READ_ONLY=0 ... ADMIN=3)."""
    return ROLE_HIERARCHY[Role.coerce(role)]


def has_role_or_higher(subject: RoleLike, required: RoleLike) -> bool:
    """Check if subject role is at least as privileged as the required role."""
    return rank(subject) >= rank(required)


def has_permission(role: RoleLike, permission: PermissionLike) -> bool:
    """
    Check if a role may exercise a permission.

    Raises:
        InvalidRole: role is not a member of Role
        UnknownPermission: permission is not a member of Permission
    """
    permission = Permission.coerce(permission)
    role = Role.coerce(role)
    return role in PERMISSION_MATRIX[permission]


def _owner_candidates(resource_owner_id) -> Iterable:
    if resource_owner_id is None:
        return ()
    if isinstance(resource_owner_id, _OWNER_COLLECTIONS):
        return resource_owner_id
    return (resource_owner_id,)


def can_access_resource(subject_role: RoleLike, subject_id, resource_owner_id) -> bool:
    """
    Check if a principal may act on a specific record.

    MANAGER and ADMIN can access every record. Everyone else only records they
    own. ``resource_owner_id`` may be a single id, ``None`` (unowned, never
    matches) or a collection of candidate owners, e.g. an activity's creator
    and assignee.

    This does not replace the category-level ``has_permission`` check; callers
    need both before mutating or deleting a record.
    """
    if has_role_or_higher(subject_role, OWNERSHIP_BYPASS_ROLE):
        return True

    if subject_id is None:
        return False

    subject_key = str(subject_id)
    return any(
        owner is not None and str(owner) == subject_key
        for owner in _owner_candidates(resource_owner_id)
    )


def get_accessible_ids(subject_role: RoleLike, subject_id, all_ids: Collection):
    """
    Owner ids a principal may query over.

    MANAGER and ADMIN get ``all_ids`` back untouched (order and duplicates
    included). Everyone else gets ``{subject_id}``, whether or not it appears in
    ``all_ids``; intersecting with real data is the caller's job.
    """
    if has_role_or_higher(subject_role, OWNERSHIP_BYPASS_ROLE):
        return all_ids
    return {subject_id}


def get_role_permissions(role: RoleLike) -> FrozenSet[Permission]:
    """All permissions granted to a role."""
    role = Role.coerce(role)
    return frozenset(perm for perm, roles in PERMISSION_MATRIX.items() if role in roles)


def permission_for(entity: Union[Entities, str], action: Union[Actions, str]) -> Permission:
    """
    Resolve an entity/action pair to its permission, e.g. ("deal", "update") -> DEAL_UPDATE.
    """
    try:
        entity_code = Entities(entity).name
        action_code = Actions(action).name
    except ValueError:
        raise UnknownPermission(f"{entity}:{action}") from None
    return Permission.coerce(f"{entity_code}_{action_code}")


def validate_permission_matrix(matrix=None) -> None:
    """
    Ensure every Permission has a non-empty set of known roles.

    Raises:
        PermissionMatrixError: listing every offending permission
    """
    matrix = PERMISSION_MATRIX if matrix is None else matrix
    problems = []

    for permission in Permission:
        roles = matrix.get(permission)
        if roles is None:
            problems.append(f"{permission.value}: missing")
        elif not roles:
            problems.append(f"{permission.value}: empty role set")
        elif not all(isinstance(role, Role) for role in roles):
            problems.append(f"{permission.value}: contains unknown roles")

    extra = [key for key in matrix if not isinstance(key, Permission)]
    for key in extra:
        problems.append(f"{key!r}: not a Permission")

    if problems:
        raise PermissionMatrixError("Invalid permission matrix: " + "; ".join(problems))


def sorted_roles(roles: Iterable[RoleLike], descending: bool = False) -> list:
    """Order roles by hierarchy rank."""
    return sorted((Role.coerce(r) for r in roles), key=rank, reverse=descending)
