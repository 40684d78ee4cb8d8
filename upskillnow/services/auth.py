"""
Authentication service for UpSkillNow
Registration, admin bootstrap, credential checks and profile updates
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from upskillnow.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
)
from upskillnow.core.logging import LoggerFactory
from upskillnow.core.security import dummy_verify_password, get_password_hash, verify_password
from upskillnow.models import User, UserRole
from upskillnow.schemas.auth import ProfileUpdate, RegisterRequest

logger = logging.getLogger(__name__)
security_logger = LoggerFactory.get_security_logger()

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Authentication service"""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    @staticmethod
    def admin_exists(db: Session) -> bool:
        query = select(User.id).where(User.role == UserRole.ADMIN, User.is_deleted.is_(False))
        return db.execute(query.limit(1)).first() is not None

    @staticmethod
    def create_user(db: Session, *, name: str, email: str, password: str, role: UserRole, **profile) -> User:
        """
        Persist a new user with a hashed password

        Raises:
            ConflictError: email already taken, including by a soft-deleted user
        """
        if AuthService.get_by_email(db, email):
            raise ConflictError("User already exists")

        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            **profile,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            raise ConflictError("User already exists")
        db.refresh(user)

        logger.info(f"Created {role.value} user {user.id}")
        return user

    @staticmethod
    def register(db: Session, data: RegisterRequest) -> User:
        """Self-registration always yields a student"""
        return AuthService.create_user(
            db, name=data.name, email=data.email, password=data.password, role=UserRole.STUDENT
        )

    @staticmethod
    def create_admin(db: Session, data: RegisterRequest, caller: Optional[User]) -> User:
        """
        Create an admin account

        Allowed for an existing admin, or for anyone while no admin exists yet.
        """
        caller_is_admin = caller is not None and caller.role == UserRole.ADMIN
        if not caller_is_admin and AuthService.admin_exists(db):
            security_logger.warning(
                "Admin creation refused",
                extra={"caller_id": caller.id if caller else None, "email": data.email},
            )
            raise AuthorizationError("Admin access required")

        user = AuthService.create_user(
            db, name=data.name, email=data.email, password=data.password, role=UserRole.ADMIN
        )
        security_logger.info(
            "Admin account created",
            extra={"user_id": user.id, "created_by": caller.id if caller else None},
        )
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User:
        """
        Check credentials

        Unknown email, wrong password and deleted accounts all fail the same way.

        Raises:
            AuthenticationError: "Invalid credentials"
        """
        user = AuthService.get_by_email(db, email)
        if user is None:
            dummy_verify_password()
            security_logger.info("Login failed", extra={"reason": "unknown_email"})
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not verify_password(password, user.hashed_password):
            security_logger.info("Login failed", extra={"reason": "bad_password", "user_id": user.id})
            raise AuthenticationError(INVALID_CREDENTIALS)

        if user.is_deleted:
            security_logger.info("Login failed", extra={"reason": "deleted", "user_id": user.id})
            raise AuthenticationError(INVALID_CREDENTIALS)

        return user

    @staticmethod
    def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
        """Apply the submitted profile fields to the caller's own account"""
        changes = data.model_dump(exclude_unset=True)
        password = changes.pop("password", None)
        if password:
            user.hashed_password = get_password_hash(password)
        for field, value in changes.items():
            if value is not None:
                setattr(user, field, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def set_profile_image(db: Session, user: User, url: str) -> User:
        user.profile_image = url
        db.commit()
        db.refresh(user)
        return user


auth_service = AuthService()
