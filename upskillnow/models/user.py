"""
User model for UpSkillNow
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from upskillnow.core.database import Base


class UserRole(str, enum.Enum):
    """User roles"""
    STUDENT = "student"
    ADMIN = "admin"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(
        Enum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        default=UserRole.STUDENT,
        nullable=False,
    )

    # Student profile
    profile_image = Column(String, default="")
    mobile = Column(String, default="")
    stream = Column(String, default="")  # CS, IT, DS or empty
    year = Column(String, default="")  # FY, SY, TY or empty
    division = Column(String, default="")
    gender = Column(String, default="")

    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Removed with the user; the database cascade does the deleting
    attempts = relationship(
        "QuizAttempt", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
