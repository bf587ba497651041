"""Default roles seeded into every installation.

- Admin: everything
- Manager: runs approval workflows and maintains templates
- Staff: raises approvals and decides the steps assigned to them
- Viewer: reads approvals
"""

from typing import Dict, List

from .permissions import Resource, Action, Permission


def _grants(resource: Resource, *actions: Action) -> List[str]:
    return [str(Permission(resource, action)) for action in actions]


ADMIN_PERMISSIONS = ["*:*"]

MANAGER_PERMISSIONS = (
    ["approvals:*", "approval_templates:*"]
    + _grants(Resource.USERS, Action.READ, Action.LIST)
    + _grants(Resource.ROLES, Action.READ, Action.LIST)
)

STAFF_PERMISSIONS = (
    _grants(
        Resource.APPROVALS,
        Action.CREATE, Action.READ, Action.UPDATE, Action.LIST, Action.DECIDE,
    )
    + _grants(Resource.APPROVAL_TEMPLATES, Action.READ, Action.LIST)
    + _grants(Resource.USERS, Action.READ, Action.LIST)
)

VIEWER_PERMISSIONS = (
    _grants(Resource.APPROVALS, Action.READ, Action.LIST)
    + _grants(Resource.APPROVAL_TEMPLATES, Action.LIST)
)


DEFAULT_ROLES: Dict[str, dict] = {
    "admin": {
        "name": "Admin",
        "description": "Full system access",
        "permissions": ADMIN_PERMISSIONS,
        "is_system": True,
    },
    "manager": {
        "name": "Manager",
        "description": "Runs approval workflows and manages templates",
        "permissions": MANAGER_PERMISSIONS,
        "is_system": True,
    },
    "staff": {
        "name": "Staff",
        "description": "Raises approvals and decides the steps assigned to them",
        "permissions": STAFF_PERMISSIONS,
        "is_system": True,
    },
    "viewer": {
        "name": "Viewer",
        "description": "Read-only access to approvals",
        "permissions": VIEWER_PERMISSIONS,
        "is_system": True,
    },
}


def get_default_role_permissions(role_key: str) -> List[str]:
    """Permissions of a default role. Raises ValueError for unknown keys."""
    try:
        return DEFAULT_ROLES[role_key]["permissions"]
    except KeyError:
        raise ValueError(f"Unknown default role: {role_key}") from None
