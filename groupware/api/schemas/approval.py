"""Approval request/response schemas."""

from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, computed_field

from groupware.core.approval.machine import find_current_step
from groupware.api.schemas.common import PaginatedResponse


class UserSummary(BaseModel):
    id: UUID
    name: Optional[str]
    department: Optional[str]
    position: Optional[str]

    class Config:
        from_attributes = True


class TemplateSummary(BaseModel):
    id: UUID
    name: str
    type: str

    class Config:
        from_attributes = True


class ApprovalStepResponse(BaseModel):
    id: UUID
    approval_id: UUID
    step_order: int
    approver_id: UUID
    approver: Optional[UserSummary]
    status: str
    comment: Optional[str]
    decided_at: Optional[datetime]

    class Config:
        from_attributes = True


class ApprovalResponse(BaseModel):
    id: UUID
    requester_id: UUID
    requester: Optional[UserSummary]
    template_id: Optional[UUID]
    template: Optional[TemplateSummary]
    type: str
    title: str
    content: str
    status: str
    steps: List[ApprovalStepResponse]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @computed_field
    @property
    def current_step_order(self) -> Optional[int]:
        """Order of the step awaiting a decision, if any."""
        if self.status != "pending":
            return None
        step = find_current_step(self.steps)
        return step.step_order if step else None


class ApprovalStats(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    cancelled: int = 0


class ApprovalListResponse(PaginatedResponse[ApprovalResponse]):
    stats: ApprovalStats


class ApprovalStepCreate(BaseModel):
    approver_id: UUID


class ApprovalCreate(BaseModel):
    # Required fields and title length are checked by the workflow so they map to 400
    type: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    template_id: Optional[UUID] = None
    steps: List[ApprovalStepCreate] = []


class ApprovalUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None


class ApprovalDecision(BaseModel):
    # Validated by the workflow so an unknown action maps to 400
    action: str
    comment: Optional[str] = None


class ApprovalTemplateResponse(BaseModel):
    id: UUID
    name: str
    type: str
    description: Optional[str]
    steps: list
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ApprovalTemplateListResponse(BaseModel):
    items: List[ApprovalTemplateResponse]
