"""Approval template endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from groupware.api.deps import get_db, get_current_user
from groupware.api.schemas.approval import ApprovalTemplateListResponse, ApprovalTemplateResponse
from groupware.core.approval import ApprovalService
from groupware.core.rbac import require_permission
from groupware.db.models import User

router = APIRouter(prefix="/approval-templates", tags=["approvals"])


@router.get("", response_model=ApprovalTemplateListResponse)
@require_permission("approval_templates:list")
async def list_approval_templates(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List active approval templates."""
    templates = ApprovalService(db).list_active_templates()
    return ApprovalTemplateListResponse(
        items=[ApprovalTemplateResponse.model_validate(t) for t in templates],
    )
