"""Approval service for managing multi-step approval requests.

Provides the high-level API over the approval state machine: loading the
aggregate under a row lock, running the machine, and flushing the result.
Callers own the transaction boundary: they commit after a successful call
and roll back when one raises.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any, List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from groupware.db.models import Approval, ApprovalStep, ApprovalTemplate, User

from .errors import ApprovalError, NotFoundError, InvalidStateError, ValidationError
from .machine import ApprovalStateMachine, check_field, parse_decision
from .states import ApprovalStatus, StepStatus

logger = logging.getLogger(__name__)

ROLE_FILTERS = ("requester", "approver")


class ApprovalService:
    """
    High-level service for approval requests.

    Handles:
    - Creating approvals with their ordered step chain
    - Reading and listing approvals with role-scoped statistics
    - Recording step decisions
    - Requester edits and cancellation
    """

    def __init__(self, db: Session):
        """
        Initialize the approval service.

        Args:
            db: Database session
        """
        self.db = db

    def create_approval(
        self,
        requester_id: UUID,
        *,
        type: str,
        title: str,
        content: str,
        approver_ids: List[UUID],
        template_id: Optional[UUID] = None,
    ) -> Approval:
        """
        Create an approval with one pending step per approver.

        Steps are ordered as given, starting at 1.

        Raises:
            ValidationError: If a required field is blank, the title is too
                long, no approvers are given, an approver is unknown or
                repeated, or the template does not exist
        """
        for name, value in (("type", type), ("title", title), ("content", content)):
            check_field(name, value)

        if not approver_ids:
            raise ValidationError("At least one approver is required", field="steps")

        if len(set(approver_ids)) != len(approver_ids):
            raise ValidationError("An approver can appear only once", field="steps")

        found = self.db.scalar(
            select(func.count()).select_from(User).where(User.id.in_(approver_ids))
        )
        if found != len(approver_ids):
            raise ValidationError("Unknown approver in steps", field="steps")

        if template_id is not None and self.db.get(ApprovalTemplate, template_id) is None:
            raise ValidationError("Approval template not found", field="template_id")

        approval = Approval(
            requester_id=requester_id,
            template_id=template_id,
            type=type,
            title=title,
            content=content,
            status=ApprovalStatus.PENDING.value,
            steps=[
                ApprovalStep(
                    approver_id=approver_id,
                    step_order=index,
                    status=StepStatus.PENDING.value,
                )
                for index, approver_id in enumerate(approver_ids, start=1)
            ],
        )
        self.db.add(approval)
        self.db.flush()

        logger.info(
            "Approval %s created by %s with %d step(s)",
            approval.id, requester_id, len(approver_ids),
        )
        return approval

    def get_approval(self, approval_id: UUID) -> Approval:
        """
        Get an approval with requester, template and ordered steps.

        Raises:
            NotFoundError: If the approval does not exist
        """
        approval = self.db.scalar(
            select(Approval)
            .where(Approval.id == approval_id)
            .options(
                selectinload(Approval.requester),
                selectinload(Approval.template),
                selectinload(Approval.steps).selectinload(ApprovalStep.approver),
            )
        )
        if approval is None:
            raise NotFoundError(f"Approval {approval_id} not found")
        return approval

    def list_approvals(
        self,
        user_id: UUID,
        *,
        status: Optional[str] = None,
        type: Optional[str] = None,
        role: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """
        List approvals, newest first.

        Args:
            user_id: The user the ``role`` filter is relative to
            status: Only approvals in this status
            type: Only approvals of this type
            role: "requester" for approvals the user raised, "approver" for
                approvals where the user holds a step, None for all
            limit: Page size
            offset: Rows to skip

        Returns:
            Dict with ``items``, ``total`` (matching the filters) and
            ``stats`` (counts per status under the role scope only)
        """
        if role is not None and role not in ROLE_FILTERS:
            raise ValidationError("role must be requester or approver", field="role")

        scope = self._role_scope(user_id, role)

        filters = list(scope)
        if status:
            filters.append(Approval.status == status)
        if type:
            filters.append(Approval.type == type)

        total = self.db.scalar(select(func.count()).select_from(Approval).where(*filters))
        items = self.db.scalars(
            select(Approval)
            .where(*filters)
            .options(
                selectinload(Approval.requester),
                selectinload(Approval.template),
                selectinload(Approval.steps).selectinload(ApprovalStep.approver),
            )
            .order_by(Approval.created_at.desc())
            .offset(offset)
            .limit(limit)
        ).all()

        return {
            "items": list(items),
            "total": total,
            "stats": self.get_stats(user_id, role=role),
        }

    def get_stats(self, user_id: UUID, *, role: Optional[str] = None) -> Dict[str, int]:
        """Count approvals per status within the role scope."""
        rows = self.db.execute(
            select(Approval.status, func.count())
            .where(*self._role_scope(user_id, role))
            .group_by(Approval.status)
        ).all()

        stats = {s.value: 0 for s in ApprovalStatus}
        for status, count in rows:
            stats[status] = count
        stats["total"] = sum(stats.values())
        return stats

    def decide(
        self,
        approval_id: UUID,
        *,
        user_id: UUID,
        action: str,
        comment: Optional[str] = None,
    ) -> Approval:
        """
        Record the current approver's decision on an approval.

        The approval row and its steps are locked for the rest of the
        transaction, so a concurrent decider either waits and then sees the
        step already decided, or fails the version check on flush.

        Args:
            approval_id: ID of the approval
            user_id: ID of the user deciding
            action: "approved" or "rejected"
            comment: Optional comment

        Returns:
            Updated approval

        Raises:
            ValidationError: If action is invalid
            NotFoundError: If approval not found
            InvalidStateError: If the approval is not pending or has no step left
            ForbiddenError: If the user is not the current approver
        """
        parse_decision(action)

        approval = self._load_for_update(approval_id)
        machine = ApprovalStateMachine(approval)

        try:
            machine.decide(user_id, action, comment=comment)
        except ApprovalError as e:
            logger.debug("Decision on approval %s refused: %s", approval_id, e)
            raise

        approval.updated_at = datetime.utcnow()
        self._flush(approval_id)

        for record in machine.get_history():
            logger.info(
                "Approval %s: %s -> %s (%s at step %s by %s)",
                approval_id, record["from_state"], record["to_state"],
                record["transition"], record["step_order"], record["user_id"],
            )
        if not machine.get_history():
            logger.info("Approval %s: step approved by %s, waiting for next step", approval_id, user_id)

        return approval

    def update_approval(
        self,
        approval_id: UUID,
        *,
        user_id: UUID,
        fields: Dict[str, Any],
    ) -> Approval:
        """
        Apply a requester edit to a pending approval.

        ``fields`` may contain ``title``, ``content``, ``type`` and
        ``status`` (only "cancelled" is accepted).

        Raises:
            NotFoundError: If approval not found
            ForbiddenError: If the user is not the requester
            InvalidStateError: If the approval is no longer pending
            ValidationError: If a field value is invalid
        """
        approval = self._load_for_update(approval_id)
        machine = ApprovalStateMachine(approval)

        try:
            changed = machine.edit(user_id, fields)
        except ApprovalError as e:
            logger.debug("Edit of approval %s refused: %s", approval_id, e)
            raise

        if changed:
            approval.updated_at = datetime.utcnow()
            self._flush(approval_id)
            logger.info("Approval %s updated by %s: %s", approval_id, user_id, ", ".join(changed))

        return approval

    def list_active_templates(self) -> List[ApprovalTemplate]:
        """Active approval templates, newest first."""
        return list(self.db.scalars(
            select(ApprovalTemplate)
            .where(ApprovalTemplate.is_active.is_(True))
            .order_by(ApprovalTemplate.created_at.desc())
        ).all())

    def _load_for_update(self, approval_id: UUID) -> Approval:
        approval = self.db.scalar(
            select(Approval)
            .where(Approval.id == approval_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        if approval is None:
            raise NotFoundError(f"Approval {approval_id} not found")

        # Lock the steps too and refresh them in case they were loaded earlier
        self.db.scalars(
            select(ApprovalStep)
            .where(ApprovalStep.approval_id == approval_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).all()
        return approval

    def _flush(self, approval_id: UUID) -> None:
        try:
            self.db.flush()
        except StaleDataError:
            logger.warning("Concurrent update detected on approval %s", approval_id)
            raise InvalidStateError("Approval was modified concurrently, reload and retry") from None

    def _role_scope(self, user_id: UUID, role: Optional[str]) -> list:
        if role == "requester":
            return [Approval.requester_id == user_id]
        if role == "approver":
            return [Approval.steps.any(ApprovalStep.approver_id == user_id)]
        return []
