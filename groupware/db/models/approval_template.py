"""Approval template model.

A template names a kind of approval (leave, purchase, ...) and suggests the
approver chain for it. Requesters still pick the concrete approvers.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Boolean, Text, Uuid

from groupware.db.base import Base


class ApprovalTemplate(Base):
    __tablename__ = "approval_templates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    
    # [{"order": 1, "role_code": "team_lead", "department_code": null}, ...]
    steps = Column(JSON, nullable=False, default=list)
    
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    def __repr__(self) -> str:
        return f"<ApprovalTemplate {self.name} [{self.type}]>"
