"""Login, logout and the current user."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.orm import Session

from groupware.api.deps import get_db, get_current_user, oauth2_scheme
from groupware.api.schemas.auth import Token, UserResponse
from groupware.core.rbac import permissions_of
from groupware.core.security import (
    verify_password,
    create_access_token,
    decode_token_claims,
    revoke_session,
)
from groupware.db.models import User

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """Exchange email and password for a bearer token. The form's ``username`` is the email."""
    user = db.scalar(select(User).where(User.email == form_data.username))

    if user is None or not verify_password(form_data.password, user.password_hash):
        logger.info("Failed login for %s", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")

    user.last_login = datetime.utcnow()
    token = create_access_token(
        user.id,
        db,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return Token(access_token=token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    token: str = Depends(oauth2_scheme),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Revoke the session behind the current token."""
    jti = (decode_token_claims(token) or {}).get("jti")
    if jti:
        revoke_session(jti, db)
    return None


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user).model_copy(
        update={"permissions": permissions_of(current_user)}
    )
