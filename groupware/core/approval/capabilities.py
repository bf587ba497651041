"""Ownership rules for approval operations.

Role permissions decide which routes a user may call at all. Whether a user
may act on a *particular* approval is decided here, in one place.
"""

from enum import Enum
from uuid import UUID

from .errors import ForbiddenError


class Operation(str, Enum):
    """Operations on an existing approval that depend on who is asking."""
    
    DECIDE = "decide"
    EDIT = "edit"
    CANCEL = "cancel"


def is_allowed(actor_id: UUID, approval, operation: Operation, current_step=None) -> bool:
    """
    Check whether an actor may perform an operation on an approval.
    
    Args:
        actor_id: Authenticated user id
        approval: Approval aggregate (needs ``requester_id``)
        operation: Operation being attempted
        current_step: The step being decided, required for DECIDE
    """
    if operation == Operation.DECIDE:
        return current_step is not None and current_step.approver_id == actor_id
    
    # Only the requester edits or cancels, never an approver
    if operation in (Operation.EDIT, Operation.CANCEL):
        return approval.requester_id == actor_id
    
    return False


def authorize(actor_id: UUID, approval, operation: Operation, current_step=None) -> None:
    """Raise ForbiddenError unless ``is_allowed`` grants the operation."""
    if is_allowed(actor_id, approval, operation, current_step):
        return
    
    if operation == Operation.DECIDE:
        raise ForbiddenError("Not your turn: only the approver of the current step can decide")
    raise ForbiddenError("Only the requester can modify this approval")

