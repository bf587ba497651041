"""Approval state machine implementation.

Works on an in-memory Approval aggregate (the ORM object or anything with
the same attributes). Knows nothing about sessions or transactions; the
service loads and persists the aggregate around it.
"""

from datetime import datetime
from typing import Optional, Dict, Any, Iterable
from uuid import UUID

from .capabilities import Operation, authorize
from .errors import InvalidStateError, ValidationError
from .states import (
    ApprovalStatus,
    ApprovalTransition,
    StepStatus,
    Decision,
    EDITABLE_STATES,
    TERMINAL_STATES,
    can_transition,
    get_target_state,
)

EDITABLE_FIELDS = ("title", "content", "type")

# Matches the width of approvals.title
MAX_TITLE_LENGTH = 255


def check_field(name: str, value: Any) -> None:
    """Raise ValidationError if a text field is blank or too long."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} must not be blank", field=name)
    if name == "title" and len(str(value)) > MAX_TITLE_LENGTH:
        raise ValidationError(
            f"title must be at most {MAX_TITLE_LENGTH} characters", field="title"
        )


def parse_decision(action: Any) -> Decision:
    """Parse an action value into a Decision."""
    try:
        return Decision(action)
    except ValueError:
        raise ValidationError(
            "Action must be one of: approved, rejected",
            field="action",
        ) from None


def find_current_step(steps: Iterable):
    """
    Return the pending step with the lowest step_order, or None.

    The current step is never stored; it is derived from the step
    statuses every time.
    """
    pending = [s for s in steps if s.status == StepStatus.PENDING.value]
    if not pending:
        return None
    return min(pending, key=lambda s: s.step_order)


def pending_steps(steps: Iterable, *, exclude=None) -> list:
    """Pending steps in order, optionally leaving one step out."""
    return sorted(
        (s for s in steps if s.status == StepStatus.PENDING.value and s is not exclude),
        key=lambda s: s.step_order,
    )


class ApprovalStateMachine:
    """
    State machine for a single approval aggregate.

    Handles:
    - Sequential decisioning over the ordered step list
    - Deriving the approval status from step outcomes
    - Requester edits and cancellation
    """

    def __init__(self, approval):
        """
        Initialize the state machine.

        Args:
            approval: Approval aggregate with ``status``, ``requester_id``
                and ``steps``
        """
        self.approval = approval
        self._transition_history: list[Dict[str, Any]] = []

    @property
    def state(self) -> ApprovalStatus:
        """Current status of the approval."""
        return ApprovalStatus(self.approval.status)

    @property
    def is_terminal(self) -> bool:
        """Check if current status is terminal (no further transitions)."""
        return self.state in TERMINAL_STATES

    @property
    def current_step(self):
        """The only step that can be decided right now."""
        return find_current_step(self.approval.steps)

    def decide(
        self,
        actor_id: UUID,
        action: Any,
        *,
        comment: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ApprovalStatus:
        """
        Record the current approver's decision.

        Args:
            actor_id: User recording the decision
            action: "approved" or "rejected"
            comment: Optional comment stored on the step
            now: Decision timestamp (defaults to utcnow)

        Returns:
            The approval status after the decision

        Raises:
            ValidationError: If the action is not a valid decision
            InvalidStateError: If the approval is not pending or has no pending step
            ForbiddenError: If the actor is not the current step's approver
        """
        decision = parse_decision(action)

        if self.state != ApprovalStatus.PENDING:
            raise InvalidStateError("Approval has already been processed", self.state.value)

        step = self.current_step
        if step is None:
            raise InvalidStateError("No step left to decide", self.state.value)

        authorize(actor_id, self.approval, Operation.DECIDE, current_step=step)

        step.status = decision.value
        step.comment = comment or None
        step.decided_at = now or datetime.utcnow()

        if decision == Decision.REJECTED:
            self._apply(ApprovalTransition.REJECT_STEP, actor_id, step=step)
        elif not pending_steps(self.approval.steps, exclude=step):
            self._apply(ApprovalTransition.APPROVE_FINAL_STEP, actor_id, step=step)

        return self.state

    def edit(self, actor_id: UUID, fields: Dict[str, Any]) -> list[str]:
        """
        Apply a requester edit, possibly including cancellation.

        Only keys in ``EDITABLE_FIELDS`` and ``status`` are considered.
        Field changes and cancellation are applied together. Every value is
        checked before anything is written, so a rejected edit leaves the
        approval untouched.

        Returns:
            Names of the attributes that were written

        Raises:
            ForbiddenError: If the actor is not the requester
            InvalidStateError: If the approval is no longer pending
            ValidationError: If ``status`` is anything but "cancelled", or a
                field is blank or too long
        """
        cancelling = "status" in fields and fields["status"] is not None
        authorize(
            actor_id,
            self.approval,
            Operation.CANCEL if cancelling else Operation.EDIT,
        )

        if self.state not in EDITABLE_STATES:
            raise InvalidStateError("Only pending approvals can be modified", self.state.value)

        if cancelling and fields["status"] != ApprovalStatus.CANCELLED.value:
            raise ValidationError("Status can only be changed to cancelled", field="status")

        updates = {
            name: fields[name]
            for name in EDITABLE_FIELDS
            if fields.get(name) is not None
        }
        for name, value in updates.items():
            check_field(name, value)

        for name, value in updates.items():
            setattr(self.approval, name, value)
        changed = list(updates)

        if cancelling:
            self._apply(ApprovalTransition.CANCEL, actor_id)
            changed.append("status")

        return changed

    def get_history(self) -> list[Dict[str, Any]]:
        """Transitions applied through this machine instance."""
        return self._transition_history.copy()

    def _apply(self, transition: ApprovalTransition, actor_id: UUID, step=None) -> None:
        from_state = self.state
        if not can_transition(from_state, transition):
            raise InvalidStateError(
                f"Cannot perform {transition.value} from status {from_state.value}",
                from_state.value,
            )

        to_state = get_target_state(from_state, transition)
        self.approval.status = to_state.value

        self._transition_history.append({
            "approval_id": self.approval.id,
            "from_state": from_state.value,
            "to_state": to_state.value,
            "transition": transition.value,
            "user_id": actor_id,
            "step_order": step.step_order if step is not None else None,
        })
