"""Permission checking utilities.

Role permissions answer "may this user call this kind of operation at all".
Rules that depend on a specific record (is this user the current approver?)
live with that record's workflow, see ``groupware.core.approval.capabilities``.
"""

from functools import wraps
from typing import Callable, Iterable, Union

from fastapi import HTTPException, status

from .permissions import Permission, Resource, Action

PermissionLike = Union[str, Permission]

GLOBAL_WILDCARD = "*:*"


def _as_string(permission: PermissionLike) -> str:
    return str(permission) if isinstance(permission, Permission) else permission


def _granting(perm_str: str) -> set[str]:
    """Every grant that would satisfy ``perm_str``, wildcards included."""
    grants = {perm_str, GLOBAL_WILDCARD}
    resource, sep, _ = perm_str.partition(":")
    if sep:
        grants.add(f"{resource}:*")
    return grants


def permissions_of(user) -> list[str]:
    """Permission strings granted to a user through their role."""
    if user is None or user.role is None:
        return []
    return list(user.role.permissions or [])


class PermissionChecker:
    """Answers permission questions for one role's grant list."""

    def __init__(self, user_permissions: Iterable[str]):
        self.permissions = frozenset(user_permissions)

    def has_permission(self, permission: PermissionLike) -> bool:
        """True if granted directly, via ``resource:*`` or via ``*:*``."""
        return not self.permissions.isdisjoint(_granting(_as_string(permission)))

    def has_any_permission(self, permissions: Iterable[PermissionLike]) -> bool:
        return any(self.has_permission(p) for p in permissions)

    def has_all_permissions(self, permissions: Iterable[PermissionLike]) -> bool:
        return all(self.has_permission(p) for p in permissions)

    def can_access_resource(self, resource: Resource, action: Action) -> bool:
        return self.has_permission(Permission(resource, action))


def has_permission(user, permission: PermissionLike) -> bool:
    """
    Check if a user has a specific permission.

    Users without a role have no permissions at all.
    """
    if not user or not user.role:
        return False
    return PermissionChecker(permissions_of(user)).has_permission(permission)


def require_permission(*permissions: PermissionLike, require_all: bool = False):
    """
    Decorator factory for FastAPI endpoints requiring specific permissions.

    The endpoint must take ``current_user`` as a keyword dependency. By
    default any one of ``permissions`` is enough; ``require_all=True``
    demands every one of them.

    Usage:
        @router.post("/approvals/{approval_id}/decide")
        @require_permission("approvals:decide")
        async def decide_approval(current_user: User = Depends(get_current_user)):
            ...
    """
    required = [_as_string(p) for p in permissions]

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            current_user = kwargs.get("current_user")

            if not current_user:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Authentication required"
                )

            if not current_user.role:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="User has no assigned role"
                )

            checker = PermissionChecker(permissions_of(current_user))
            check = checker.has_all_permissions if require_all else checker.has_any_permission

            if not check(required):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Insufficient permissions. Required: {', '.join(required)}"
                )

            return await func(*args, **kwargs)

        return wrapper
    return decorator
