"""Approval workflow API endpoints."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from groupware.api.deps import get_db, get_current_user
from groupware.api.schemas.approval import (
    ApprovalCreate,
    ApprovalDecision,
    ApprovalListResponse,
    ApprovalResponse,
    ApprovalUpdate,
)
from groupware.core.approval import (
    ApprovalService,
    ApprovalError,
    NotFoundError,
    ForbiddenError,
)
from groupware.core.config import get_settings
from groupware.core.rbac import require_permission
from groupware.db.models import User

router = APIRouter(prefix="/approvals", tags=["approvals"])
settings = get_settings()
logger = logging.getLogger(__name__)


def _to_http(error: ApprovalError) -> HTTPException:
    """Map a workflow error to an HTTP error response."""
    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ForbiddenError):
        code = status.HTTP_403_FORBIDDEN
    else:
        # InvalidStateError, ValidationError
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=error.message)


@router.get("", response_model=ApprovalListResponse)
@require_permission("approvals:list")
async def list_approvals(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[str] = None,
    type: Optional[str] = None,
    role: Optional[str] = Query(None, description="requester or approver"),
):
    """List approvals with per-status counts for the same role scope."""
    service = ApprovalService(db)

    try:
        result = service.list_approvals(
            current_user.id,
            status=status,
            type=type,
            role=role,
            limit=per_page,
            offset=(page - 1) * per_page,
        )
    except ApprovalError as e:
        raise _to_http(e)

    return ApprovalListResponse.create(
        items=[ApprovalResponse.model_validate(a) for a in result["items"]],
        total=result["total"],
        page=page,
        per_page=per_page,
        stats=result["stats"],
    )


@router.post("", response_model=ApprovalResponse, status_code=201)
@require_permission("approvals:create")
async def create_approval(
    body: ApprovalCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Raise a new approval with an ordered approver chain."""
    service = ApprovalService(db)

    try:
        approval = service.create_approval(
            current_user.id,
            type=body.type,
            title=body.title,
            content=body.content,
            approver_ids=[step.approver_id for step in body.steps],
            template_id=body.template_id,
        )
        db.commit()
    except ApprovalError as e:
        db.rollback()
        raise _to_http(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to create approval")
        raise

    return ApprovalResponse.model_validate(service.get_approval(approval.id))


@router.get("/{approval_id}", response_model=ApprovalResponse)
@require_permission("approvals:read")
async def get_approval(
    approval_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get an approval with its requester and ordered steps."""
    service = ApprovalService(db)

    try:
        approval = service.get_approval(approval_id)
    except ApprovalError as e:
        raise _to_http(e)

    return ApprovalResponse.model_validate(approval)


@router.put("/{approval_id}", response_model=ApprovalResponse)
@require_permission("approvals:update")
async def update_approval(
    approval_id: UUID,
    body: ApprovalUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit or cancel a pending approval. Only the requester may do this."""
    service = ApprovalService(db)

    try:
        service.update_approval(
            approval_id,
            user_id=current_user.id,
            fields=body.model_dump(exclude_unset=True),
        )
        db.commit()
    except ApprovalError as e:
        db.rollback()
        raise _to_http(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to update approval %s", approval_id)
        raise

    return ApprovalResponse.model_validate(service.get_approval(approval_id))


@router.post("/{approval_id}/decide", response_model=ApprovalResponse)
@require_permission("approvals:decide")
async def decide_approval(
    approval_id: UUID,
    body: ApprovalDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Approve or reject the current step. Only its approver may do this."""
    service = ApprovalService(db)

    try:
        service.decide(
            approval_id,
            user_id=current_user.id,
            action=body.action,
            comment=body.comment,
        )
        db.commit()
    except ApprovalError as e:
        db.rollback()
        raise _to_http(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to record decision on approval %s", approval_id)
        raise

    return ApprovalResponse.model_validate(service.get_approval(approval_id))
