"""
Student management service
Admin-side listing, editing and the soft/hard delete lifecycle
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from upskillnow.core.exceptions import ConflictError, NotFoundError, ValidationError
from upskillnow.core.logging import LoggerFactory
from upskillnow.core.security import get_password_hash
from upskillnow.models import User, UserRole
from upskillnow.schemas.users import StudentCreate, StudentUpdate
from upskillnow.services.auth import AuthService
from upskillnow.services.cloudinary import CloudinaryService

logger = logging.getLogger(__name__)
security_logger = LoggerFactory.get_security_logger()


class UserService:
    @staticmethod
    def create_student(db: Session, data: StudentCreate) -> User:
        profile = data.model_dump(exclude={"name", "email", "password"})
        return AuthService.create_user(
            db,
            name=data.name,
            email=data.email,
            password=data.password,
            role=UserRole.STUDENT,
            **profile,
        )

    @staticmethod
    def list_students(
        db: Session,
        *,
        deleted: bool = False,
        name: Optional[str] = None,
        email: Optional[str] = None,
        stream: Optional[str] = None,
        year: Optional[str] = None,
        mobile: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """
        Filtered, paginated student listing

        Name and email match case-insensitive substrings; the other filters
        match exactly.

        Returns:
            (students on the requested page, total matching students)
        """
        conditions = [User.role == UserRole.STUDENT, User.is_deleted.is_(deleted)]
        if name:
            conditions.append(User.name.ilike(f"%{name}%"))
        if email:
            conditions.append(User.email.ilike(f"%{email}%"))
        if stream:
            conditions.append(User.stream == stream)
        if year:
            conditions.append(User.year == year)
        if mobile:
            conditions.append(User.mobile == mobile)

        total = db.execute(select(func.count(User.id)).where(*conditions)).scalar_one()
        students = (
            db.execute(
                select(User)
                .where(*conditions)
                .order_by(User.id)
                .offset((page - 1) * limit)
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return list(students), total

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """A student account; admins are not managed through these routes"""
        user = db.get(User, user_id)
        if not user or user.role != UserRole.STUDENT:
            raise NotFoundError("Student")
        return user

    @staticmethod
    def update_user(db: Session, user_id: int, data: StudentUpdate) -> User:
        """Admin edit; only non-empty fields are applied"""
        user = UserService.get_user(db, user_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v not in (None, "")}

        new_email = changes.get("email")
        if new_email and new_email != user.email and AuthService.get_by_email(db, new_email):
            raise ConflictError("Email already exists")

        password = changes.pop("password", None)
        if password:
            user.hashed_password = get_password_hash(password)
        for field, value in changes.items():
            setattr(user, field, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def soft_delete(db: Session, user_id: int) -> User:
        user = UserService.get_user(db, user_id)
        user.is_deleted = True
        user.deleted_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(user)
        security_logger.info("User soft deleted", extra={"user_id": user_id})
        return user

    @staticmethod
    def restore(db: Session, user_id: int) -> User:
        user = UserService.get_user(db, user_id)
        user.is_deleted = False
        user.deleted_at = None
        db.commit()
        db.refresh(user)
        security_logger.info("User restored", extra={"user_id": user_id})
        return user

    @staticmethod
    def hard_delete(db: Session, user_id: int, storage: CloudinaryService) -> None:
        """Remove the record and the student's media folder"""
        user = UserService.get_user(db, user_id)
        db.delete(user)
        db.commit()
        storage.delete_student_folder(user_id)
        security_logger.warning("User permanently deleted", extra={"user_id": user_id})

    @staticmethod
    def _require_ids(ids: Sequence[int]) -> List[int]:
        if not ids:
            raise ValidationError("No student IDs provided")
        return list(dict.fromkeys(ids))

    @staticmethod
    def _students(ids: Sequence[int]):
        return User.id.in_(ids), User.role == UserRole.STUDENT

    @staticmethod
    def bulk_soft_delete(db: Session, ids: Sequence[int]) -> int:
        ids = UserService._require_ids(ids)
        result = db.execute(
            update(User)
            .where(*UserService._students(ids))
            .values(is_deleted=True, deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        db.commit()
        security_logger.info("Users soft deleted", extra={"user_ids": ids, "count": result.rowcount})
        return result.rowcount

    @staticmethod
    def bulk_restore(db: Session, ids: Sequence[int]) -> int:
        ids = UserService._require_ids(ids)
        result = db.execute(
            update(User)
            .where(*UserService._students(ids))
            .values(is_deleted=False, deleted_at=None)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        security_logger.info("Users restored", extra={"user_ids": ids, "count": result.rowcount})
        return result.rowcount

    @staticmethod
    def bulk_hard_delete(db: Session, ids: Sequence[int], storage: CloudinaryService) -> int:
        ids = UserService._require_ids(ids)
        existing = db.execute(select(User.id).where(*UserService._students(ids))).scalars().all()
        db.execute(
            delete(User).where(User.id.in_(existing)).execution_options(synchronize_session=False)
        )
        db.commit()
        storage.delete_student_folders(existing)
        security_logger.warning(
            "Users permanently deleted", extra={"user_ids": list(existing), "count": len(existing)}
        )
        return len(existing)


user_service = UserService()
