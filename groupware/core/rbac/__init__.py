"""RBAC (Role-Based Access Control) module.

Permission strings, default roles, and the route-level permission check.
"""

from .permissions import Permission, Resource, Action, PERMISSION_DEFINITIONS
from .checker import PermissionChecker, has_permission, permissions_of, require_permission

__all__ = [
    "Permission",
    "Resource",
    "Action",
    "PERMISSION_DEFINITIONS",
    "PermissionChecker",
    "has_permission",
    "permissions_of",
    "require_permission",
]
