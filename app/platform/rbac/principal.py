"""
Authenticated principal handed to the policy engine.

The session resolver (JWT authentication) lives outside this app; this module
only adapts whatever it put on ``request.user`` into a ``Principal``.
"""

from dataclasses import dataclass

from rest_framework.exceptions import NotAuthenticated

from .constants import Role


@dataclass(frozen=True)
class Principal:
    id: str
    role: Role

    def __post_init__(self):
        # Validates the role and normalizes plain strings to Role members
        object.__setattr__(self, "role", Role.coerce(self.role))


def _get_user_id(user):
    # supports either user.userId or user.id
    user_id = getattr(user, "userId", None)
    if user_id is None:
        user_id = getattr(user, "id", None)
    return str(user_id) if user_id is not None else None


def principal_from_user(user) -> Principal:
    """
    Build a Principal from an authenticated user object.

    Raises:
        NotAuthenticated: no user, anonymous user, or a user without an id
        InvalidRole: the user's role is not a known Role
    """
    if user is None or not getattr(user, "is_authenticated", False):
        raise NotAuthenticated()

    user_id = _get_user_id(user)
    if not user_id:
        raise NotAuthenticated("Authenticated user has no id.")

    return Principal(id=user_id, role=getattr(user, "role", None))


def get_principal(request) -> Principal:
    """Resolve the request's principal, caching it on the request."""
    principal = getattr(request, "_rbac_principal", None)
    if principal is None:
        principal = principal_from_user(getattr(request, "user", None))
        request._rbac_principal = principal
    return principal
