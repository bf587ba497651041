"""Permission model for groupware RBAC.

A permission is a ``resource:action`` string, e.g. ``approvals:decide`` or
``approval_templates:list``. Roles may also hold ``resource:*`` and ``*:*``
wildcards; those are resolved by the checker, not listed here.
"""

from enum import Enum
from typing import NamedTuple, FrozenSet


class Resource(str, Enum):
    APPROVALS = "approvals"
    APPROVAL_TEMPLATES = "approval_templates"
    USERS = "users"
    ROLES = "roles"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
    DECIDE = "decide"   # approve or reject the current step
    MANAGE = "manage"


class Permission(NamedTuple):
    resource: Resource
    action: Action

    def __str__(self) -> str:
        return f"{self.resource.value}:{self.action.value}"

    @classmethod
    def from_string(cls, perm_str: str) -> "Permission":
        """Parse ``resource:action``. Raises ValueError on anything else."""
        resource, sep, action = perm_str.partition(":")
        if not sep or ":" in action:
            raise ValueError(f"Invalid permission format: {perm_str}")
        return cls(Resource(resource), Action(action))


# Approvals are never deleted, only cancelled
PERMISSION_MATRIX: dict[Resource, FrozenSet[Action]] = {
    Resource.APPROVALS: frozenset({
        Action.CREATE, Action.READ, Action.UPDATE, Action.LIST, Action.DECIDE,
    }),
    Resource.APPROVAL_TEMPLATES: frozenset({
        Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE, Action.LIST,
    }),
    Resource.USERS: frozenset({
        Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE, Action.LIST, Action.MANAGE,
    }),
    Resource.ROLES: frozenset({
        Action.READ, Action.LIST, Action.MANAGE,
    }),
}

# "resource:action" -> Permission, for every valid pair
PERMISSION_DEFINITIONS: dict[str, Permission] = {
    str(Permission(resource, action)): Permission(resource, action)
    for resource, actions in PERMISSION_MATRIX.items()
    for action in actions
}


def is_valid_permission(perm_str: str) -> bool:
    return perm_str in PERMISSION_DEFINITIONS


def get_permissions_for_resource(resource: Resource) -> list[str]:
    return sorted(str(Permission(resource, a)) for a in PERMISSION_MATRIX.get(resource, ()))


def get_all_permissions() -> list[str]:
    return sorted(PERMISSION_DEFINITIONS)
