"""Database models for the groupware service."""

from groupware.db.models.role import Role
from groupware.db.models.user import User
from groupware.db.models.session import Session
from groupware.db.models.approval_template import ApprovalTemplate
from groupware.db.models.approval import Approval, ApprovalStep

__all__ = [
    "Role",
    "User",
    "Session",
    "ApprovalTemplate",
    "Approval",
    "ApprovalStep",
]
