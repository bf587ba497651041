"""Approval workflow database models.

An Approval owns an ordered chain of ApprovalSteps. The Approval row carries
a version counter so concurrent writers to the same aggregate cannot both
commit.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from groupware.db.base import Base


class Approval(Base):
    """
    A multi-step sign-off request raised by a requester.
    
    Status is derived from the step outcomes, except for ``cancelled`` which
    only the requester can set.
    """
    __tablename__ = "approvals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    requester_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    template_id = Column(Uuid, ForeignKey("approval_templates.id", ondelete="SET NULL"), nullable=True)
    
    # Payload, opaque to the workflow
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    
    # Workflow state
    status = Column(String(20), nullable=False, default="pending", index=True)
    version = Column(Integer, nullable=False)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    requester = relationship("User", back_populates="approvals", foreign_keys=[requester_id])
    template = relationship("ApprovalTemplate")
    steps = relationship(
        "ApprovalStep",
        back_populates="approval",
        order_by="ApprovalStep.step_order",
        cascade="all, delete-orphan",
    )
    
    __mapper_args__ = {"version_id_col": version}
    
    def __repr__(self) -> str:
        return f"<Approval {self.title!r} [{self.status}]>"


class ApprovalStep(Base):
    """One approver's slot in the ordered approval chain."""
    __tablename__ = "approval_steps"
    __table_args__ = (
        UniqueConstraint("approval_id", "step_order", name="uq_approval_steps_approval_id_step_order"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    approval_id = Column(Uuid, ForeignKey("approvals.id", ondelete="CASCADE"), nullable=False, index=True)
    step_order = Column(Integer, nullable=False)
    approver_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    
    status = Column(String(20), nullable=False, default="pending")
    comment = Column(Text, nullable=True)
    decided_at = Column(DateTime, nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    approval = relationship("Approval", back_populates="steps")
    approver = relationship("User")
    
    def __repr__(self) -> str:
        return f"<ApprovalStep #{self.step_order} [{self.status}]>"
