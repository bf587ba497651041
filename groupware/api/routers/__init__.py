"""API routers for the groupware service."""

from . import auth
from . import approvals
from . import approval_templates
from . import health

__all__ = [
    "auth",
    "approvals",
    "approval_templates",
    "health",
]
