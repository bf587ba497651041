import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Boolean, Text, Uuid
from sqlalchemy.orm import relationship

from groupware.db.base import Base


class Role(Base):
    """Named set of ``resource:action`` permission strings."""
    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    permissions = Column(JSON, nullable=False, default=list)
    is_system = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    users = relationship("User", back_populates="role")

    def __repr__(self) -> str:
        return f"<Role {self.name}>"
