"""
User Model
Stores user credentials and profile information.
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship
from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    """Roles that widen what a user may do to recipes they do not own."""
    STANDARD = "standard"
    MODERATOR = "moderator"
    ADMIN = "admin"


class User(Base):
    """
    User model for authentication.
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(1024), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.STANDARD,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    recipes = relationship("Recipe", back_populates="owner", passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
