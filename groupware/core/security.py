"""Passwords, access tokens and the sessions behind them.

Every access token carries a ``jti`` claim naming a row in ``sessions``.
A token is accepted only while that row exists and is not revoked, so
logging out takes effect before the token expires.
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from groupware.core.config import get_settings
from groupware.db.models import Session as SessionModel

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _live_session(jti: str, db: Session) -> Optional[SessionModel]:
    return db.scalar(
        select(SessionModel).where(
            SessionModel.token_jti == jti,
            SessionModel.revoked_at.is_(None),
        )
    )


def create_access_token(
    user_id: UUID,
    db: Session,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue a signed access token and record its session.

    Commits ``db`` so the session row is visible to the next request.
    """
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    expires_at = datetime.utcnow() + lifetime
    jti = str(uuid.uuid4())

    db.add(SessionModel(
        user_id=user_id,
        token_jti=jti,
        ip_address=ip_address,
        user_agent=user_agent,
        expires_at=expires_at,
    ))
    db.commit()

    claims = {"sub": str(user_id), "jti": jti, "exp": expires_at, "type": "access"}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_token_claims(token: str) -> Optional[dict]:
    """Claims of a well-signed, unexpired token, else None."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def decode_token(token: str, db: Session) -> Optional[UUID]:
    """User id behind a token whose session is still live, else None."""
    claims = decode_token_claims(token)
    if not claims or not claims.get("sub") or not claims.get("jti"):
        return None

    if _live_session(claims["jti"], db) is None:
        return None

    try:
        return UUID(claims["sub"])
    except ValueError:
        return None


def revoke_session(jti: str, db: Session) -> bool:
    """Revoke a session by JWT ID. Returns False if it was not live."""
    session = _live_session(jti, db)
    if session is None:
        return False
    session.revoked_at = datetime.utcnow()
    db.commit()
    return True
