from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional, List


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: UUID
    email: str
    name: Optional[str]
    department: Optional[str]
    position: Optional[str]
    role_id: UUID
    is_active: bool
    created_at: datetime
    permissions: List[str] = []

    class Config:
        from_attributes = True
