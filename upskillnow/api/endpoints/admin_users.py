"""
Admin student management endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from upskillnow.core.database import get_db
from upskillnow.core.security import require_admin
from upskillnow.models import User
from upskillnow.schemas.auth import MessageResponse
from upskillnow.schemas.users import (
    BulkResult,
    StudentCreate,
    StudentDetail,
    StudentEnvelope,
    StudentList,
    StudentUpdate,
    UserIds,
)
from upskillnow.services.cloudinary import CloudinaryService, get_storage
from upskillnow.services.users import user_service

router = APIRouter()


def _list(db: Session, deleted: bool, **filters) -> dict:
    students, total = user_service.list_students(db, deleted=deleted, **filters)
    return {"students": students, "total": total, "page": filters["page"], "limit": filters["limit"]}


@router.post("/", response_model=StudentEnvelope, status_code=status.HTTP_201_CREATED)
def create_student(
    data: StudentCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a student account"""
    student = user_service.create_student(db, data)
    return {"message": "Student created", "student": student}


@router.get("/", response_model=StudentList)
def list_students(
    name: Optional[str] = None,
    email: Optional[str] = None,
    stream: Optional[str] = None,
    year: Optional[str] = None,
    mobile: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """List active students with optional filters"""
    return _list(
        db, False, name=name, email=email, stream=stream, year=year, mobile=mobile, page=page, limit=limit
    )


@router.get("/deleted", response_model=StudentList)
def list_deleted_students(
    name: Optional[str] = None,
    email: Optional[str] = None,
    stream: Optional[str] = None,
    year: Optional[str] = None,
    mobile: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """List soft-deleted students"""
    return _list(
        db, True, name=name, email=email, stream=stream, year=year, mobile=mobile, page=page, limit=limit
    )


# Bulk routes come before /{user_id} so their literal segments win


@router.delete("/soft", response_model=BulkResult)
def bulk_soft_delete(body: UserIds, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    count = user_service.bulk_soft_delete(db, body.ids)
    return {"message": "Students soft deleted", "count": count}


@router.put("/restore", response_model=BulkResult)
def bulk_restore(body: UserIds, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    count = user_service.bulk_restore(db, body.ids)
    return {"message": "Students restored", "count": count}


@router.delete("/hard", response_model=BulkResult)
def bulk_hard_delete(
    body: UserIds,
    admin: User = Depends(require_admin),
    storage: CloudinaryService = Depends(get_storage),
    db: Session = Depends(get_db),
):
    count = user_service.bulk_hard_delete(db, body.ids, storage)
    return {"message": "Students permanently deleted", "count": count}


@router.get("/{user_id}", response_model=StudentDetail)
def get_student(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return {"student": user_service.get_user(db, user_id)}


@router.put("/{user_id}", response_model=StudentEnvelope)
def update_student(
    user_id: int,
    data: StudentUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    student = user_service.update_user(db, user_id, data)
    return {"message": "Student updated", "student": student}


@router.delete("/{user_id}", response_model=StudentEnvelope)
def soft_delete_student(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Soft delete: the account is hidden and locked out but can be restored"""
    student = user_service.soft_delete(db, user_id)
    return {"message": "Student soft deleted", "student": student}


@router.put("/{user_id}/restore", response_model=StudentEnvelope)
def restore_student(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    student = user_service.restore(db, user_id)
    return {"message": "Student restored", "student": student}


@router.delete("/{user_id}/hard", response_model=MessageResponse)
def hard_delete_student(
    user_id: int,
    admin: User = Depends(require_admin),
    storage: CloudinaryService = Depends(get_storage),
    db: Session = Depends(get_db),
):
    """Permanently remove the account and its media folder"""
    user_service.hard_delete(db, user_id, storage)
    return {"message": "Student permanently deleted"}
