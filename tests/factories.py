"""Factory functions for creating test database records.

Each factory creates a model instance, adds it to the session, and flushes
so that database-generated fields (id, created_at, etc.) are populated.
All fields have sensible defaults but can be overridden via keyword arguments.

Usage::

    from tests.factories import create_user, create_approval

    def test_something(db_session):
        requester = create_user(db_session)
        approver = create_user(db_session)
        approval = create_approval(db_session, requester=requester, approvers=[approver])
        assert approval.steps[0].approver_id == approver.id
"""

from typing import Optional, Sequence

from sqlalchemy.orm import Session

from groupware.core.rbac.roles import STAFF_PERMISSIONS
from groupware.core.security import get_password_hash
from groupware.db.models import (
    Approval,
    ApprovalStep,
    ApprovalTemplate,
    Role,
    User,
)


_counter = 0

TEST_PASSWORD = "testpass123"
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def _next_id() -> int:
    """Return a monotonically increasing integer for unique default values."""
    global _counter
    _counter += 1
    return _counter


# ---------------------------------------------------------------------------
# Role
# ---------------------------------------------------------------------------


def create_role(
    session: Session,
    *,
    name: Optional[str] = None,
    permissions: Optional[list] = None,
    is_system: bool = False,
) -> Role:
    n = _next_id()
    role = Role(
        name=name or f"role-{n}",
        permissions=list(STAFF_PERMISSIONS) if permissions is None else permissions,
        is_system=is_system,
    )
    session.add(role)
    session.flush()
    return role


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


def create_user(
    session: Session,
    *,
    role: Optional[Role] = None,
    email: Optional[str] = None,
    name: Optional[str] = None,
    department: Optional[str] = "Sales",
    position: Optional[str] = None,
    password_hash: Optional[str] = None,
    is_active: bool = True,
) -> User:
    if role is None:
        role = create_role(session)
    n = _next_id()
    user = User(
        role_id=role.id,
        email=email or f"user-{n}@example.com",
        name=name or f"Test User {n}",
        department=department,
        position=position,
        password_hash=password_hash or TEST_PASSWORD_HASH,
        is_active=is_active,
    )
    session.add(user)
    session.flush()
    return user


# ---------------------------------------------------------------------------
# ApprovalTemplate
# ---------------------------------------------------------------------------


def create_template(
    session: Session,
    *,
    name: Optional[str] = None,
    type: str = "leave",
    steps: Optional[list] = None,
    is_active: bool = True,
) -> ApprovalTemplate:
    n = _next_id()
    template = ApprovalTemplate(
        name=name or f"Template {n}",
        type=type,
        description=f"Template number {n}",
        steps=steps if steps is not None else [
            {"order": 1, "role_code": "team_lead", "department_code": None},
        ],
        is_active=is_active,
    )
    session.add(template)
    session.flush()
    return template


# ---------------------------------------------------------------------------
# Approval
# ---------------------------------------------------------------------------


def create_approval(
    session: Session,
    *,
    requester: Optional[User] = None,
    approvers: Optional[Sequence[User]] = None,
    type: str = "leave",
    title: Optional[str] = None,
    content: str = "Two days off",
    status: str = "pending",
    step_statuses: Optional[Sequence[str]] = None,
    template: Optional[ApprovalTemplate] = None,
) -> Approval:
    """Create an approval directly, bypassing the workflow checks.

    ``step_statuses`` lets a test start from an arbitrary step layout.
    """
    if requester is None:
        requester = create_user(session)
    if approvers is None:
        approvers = [create_user(session)]
    if step_statuses is None:
        step_statuses = ["pending"] * len(approvers)
    n = _next_id()
    approval = Approval(
        requester_id=requester.id,
        template_id=template.id if template else None,
        type=type,
        title=title or f"Approval {n}",
        content=content,
        status=status,
        steps=[
            ApprovalStep(approver_id=approver.id, step_order=order, status=step_status)
            for order, (approver, step_status) in enumerate(zip(approvers, step_statuses), start=1)
        ],
    )
    session.add(approval)
    session.flush()
    return approval
