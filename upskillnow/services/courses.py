"""
Course content service
Courses own ordered chapters, chapters own ordered modules
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from upskillnow.core.exceptions import NotFoundError
from upskillnow.models import Chapter, Course, Module
from upskillnow.schemas.courses import (
    ChapterCreate,
    ChapterUpdate,
    CourseCreate,
    CourseUpdate,
    ModuleCreate,
    ModuleUpdate,
)

logger = logging.getLogger(__name__)

COURSE_TREE = selectinload(Course.chapters).selectinload(Chapter.modules)


def _next_position(db: Session, column, parent_column, parent_id: int) -> int:
    current = db.execute(select(func.max(column)).where(parent_column == parent_id)).scalar()
    return 0 if current is None else current + 1


class CourseService:
    """Course, chapter and module operations"""

    # Courses

    @staticmethod
    def list_courses(db: Session) -> List[Course]:
        query = select(Course).options(COURSE_TREE)
        return list(db.execute(query.order_by(Course.id)).scalars().all())

    @staticmethod
    def filter_courses(db: Session, department: str, year: str, semester: str) -> List[Course]:
        query = select(Course).where(
            Course.department == department,
            Course.year == year,
            Course.semester == semester,
        )
        return list(db.execute(query.order_by(Course.id)).scalars().all())

    @staticmethod
    def get_course(db: Session, course_id: int) -> Course:
        course = db.get(Course, course_id, options=[COURSE_TREE])
        if not course:
            raise NotFoundError("Course")
        return course

    @staticmethod
    def create_course(db: Session, data: CourseCreate) -> Course:
        course = Course(**data.model_dump(exclude={"chapters"}))
        for position, chapter_data in enumerate(data.chapters):
            course.chapters.append(CourseService._build_chapter(chapter_data, position))

        db.add(course)
        db.commit()
        db.refresh(course)
        logger.info(f"Created course {course.id} with {len(course.chapters)} chapters")
        return course

    @staticmethod
    def update_course(db: Session, course_id: int, data: CourseUpdate) -> Course:
        course = CourseService.get_course(db, course_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(course, field, value)
        db.commit()
        db.refresh(course)
        return course

    @staticmethod
    def delete_course(db: Session, course_id: int) -> None:
        course = CourseService.get_course(db, course_id)
        db.delete(course)
        db.commit()
        logger.info(f"Deleted course {course_id}")

    # Chapters

    @staticmethod
    def _build_chapter(data: ChapterCreate, position: int) -> Chapter:
        chapter = Chapter(title=data.title, position=position)
        for module_position, module_data in enumerate(data.modules):
            chapter.modules.append(Module(**module_data.model_dump(), position=module_position))
        return chapter

    @staticmethod
    def get_chapter(db: Session, course_id: int, chapter_id: int) -> Chapter:
        chapter = db.get(Chapter, chapter_id)
        if not chapter or chapter.course_id != course_id:
            raise NotFoundError("Chapter")
        return chapter

    @staticmethod
    def add_chapter(db: Session, course_id: int, data: ChapterCreate) -> Chapter:
        CourseService.get_course(db, course_id)
        position = _next_position(db, Chapter.position, Chapter.course_id, course_id)
        chapter = CourseService._build_chapter(data, position)
        chapter.course_id = course_id
        db.add(chapter)
        db.commit()
        db.refresh(chapter)
        return chapter

    @staticmethod
    def update_chapter(db: Session, course_id: int, chapter_id: int, data: ChapterUpdate) -> Chapter:
        chapter = CourseService.get_chapter(db, course_id, chapter_id)
        chapter.title = data.title
        db.commit()
        db.refresh(chapter)
        return chapter

    @staticmethod
    def delete_chapter(db: Session, course_id: int, chapter_id: int) -> None:
        chapter = CourseService.get_chapter(db, course_id, chapter_id)
        db.delete(chapter)
        db.commit()

    # Modules

    @staticmethod
    def get_module(db: Session, course_id: int, chapter_id: int, module_id: int) -> Module:
        CourseService.get_chapter(db, course_id, chapter_id)
        module = db.get(Module, module_id)
        if not module or module.chapter_id != chapter_id:
            raise NotFoundError("Module")
        return module

    @staticmethod
    def add_module(db: Session, course_id: int, chapter_id: int, data: ModuleCreate) -> Module:
        CourseService.get_chapter(db, course_id, chapter_id)
        position = _next_position(db, Module.position, Module.chapter_id, chapter_id)
        module = Module(**data.model_dump(), chapter_id=chapter_id, position=position)
        db.add(module)
        db.commit()
        db.refresh(module)
        return module

    @staticmethod
    def update_module(
        db: Session, course_id: int, chapter_id: int, module_id: int, data: ModuleUpdate
    ) -> Module:
        module = CourseService.get_module(db, course_id, chapter_id, module_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(module, field, value)
        db.commit()
        db.refresh(module)
        return module

    @staticmethod
    def delete_module(db: Session, course_id: int, chapter_id: int, module_id: int) -> None:
        module = CourseService.get_module(db, course_id, chapter_id, module_id)
        db.delete(module)
        db.commit()


course_service = CourseService()
