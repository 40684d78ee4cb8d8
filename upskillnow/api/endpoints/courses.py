"""
Course endpoints
Any signed-in user can read; only admins can change content
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from upskillnow.core.database import get_db
from upskillnow.core.exceptions import ValidationError
from upskillnow.core.security import get_current_user, require_admin
from upskillnow.models import User
from upskillnow.schemas.auth import MessageResponse
from upskillnow.schemas.courses import (
    ChapterCreate,
    ChapterResponse,
    ChapterUpdate,
    CourseCreate,
    CourseResponse,
    CourseSummary,
    CourseUpdate,
    ModuleCreate,
    ModuleResponse,
    ModuleUpdate,
)
from upskillnow.services.courses import course_service

router = APIRouter()


@router.get("/", response_model=List[CourseResponse])
def list_courses(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """All courses with their chapters and modules"""
    return course_service.list_courses(db)


@router.get("/filter", response_model=List[CourseSummary])
def filter_courses(
    department: Optional[str] = None,
    year: Optional[str] = None,
    semester: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Course summaries for one department, year and semester"""
    if not (department and year and semester):
        raise ValidationError("department, year and semester are all required")
    return course_service.filter_courses(db, department, year, semester)


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(course_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return course_service.get_course(db, course_id)


@router.post("/", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(data: CourseCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return course_service.create_course(db, data)


@router.put("/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: int,
    data: CourseUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return course_service.update_course(db, course_id, data)


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(course_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete a course together with its chapters and modules"""
    course_service.delete_course(db, course_id)
    return {"message": "Course deleted successfully"}


# Chapters


@router.post(
    "/{course_id}/chapters", response_model=ChapterResponse, status_code=status.HTTP_201_CREATED
)
def add_chapter(
    course_id: int,
    data: ChapterCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return course_service.add_chapter(db, course_id, data)


@router.get("/{course_id}/chapters/{chapter_id}", response_model=ChapterResponse)
def get_chapter(
    course_id: int,
    chapter_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return course_service.get_chapter(db, course_id, chapter_id)


@router.put("/{course_id}/chapters/{chapter_id}", response_model=ChapterResponse)
def update_chapter(
    course_id: int,
    chapter_id: int,
    data: ChapterUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return course_service.update_chapter(db, course_id, chapter_id, data)


@router.delete("/{course_id}/chapters/{chapter_id}", response_model=MessageResponse)
def delete_chapter(
    course_id: int,
    chapter_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    course_service.delete_chapter(db, course_id, chapter_id)
    return {"message": "Chapter deleted successfully"}


# Modules


@router.post(
    "/{course_id}/chapters/{chapter_id}/modules",
    response_model=ModuleResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_module(
    course_id: int,
    chapter_id: int,
    data: ModuleCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return course_service.add_module(db, course_id, chapter_id, data)


@router.get("/{course_id}/chapters/{chapter_id}/modules/{module_id}", response_model=ModuleResponse)
def get_module(
    course_id: int,
    chapter_id: int,
    module_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return course_service.get_module(db, course_id, chapter_id, module_id)


@router.put("/{course_id}/chapters/{chapter_id}/modules/{module_id}", response_model=ModuleResponse)
def update_module(
    course_id: int,
    chapter_id: int,
    module_id: int,
    data: ModuleUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Partial update; fields not sent keep their current value"""
    return course_service.update_module(db, course_id, chapter_id, module_id, data)


@router.delete("/{course_id}/chapters/{chapter_id}/modules/{module_id}", response_model=MessageResponse)
def delete_module(
    course_id: int,
    chapter_id: int,
    module_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    course_service.delete_module(db, course_id, chapter_id, module_id)
    return {"message": "Module deleted successfully"}
