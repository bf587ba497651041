"""Approval workflow module.

Implements sequential multi-step approvals: the status state machine, the
ownership rules, and the persistence-backed service.
"""

from .states import ApprovalStatus, StepStatus, Decision, ApprovalTransition, VALID_TRANSITIONS
from .errors import ApprovalError, NotFoundError, InvalidStateError, ForbiddenError, ValidationError
from .machine import ApprovalStateMachine
from .service import ApprovalService

__all__ = [
    "ApprovalStatus",
    "StepStatus",
    "Decision",
    "ApprovalTransition",
    "VALID_TRANSITIONS",
    "ApprovalError",
    "NotFoundError",
    "InvalidStateError",
    "ForbiddenError",
    "ValidationError",
    "ApprovalStateMachine",
    "ApprovalService",
]
