"""
Notes service
Bulk note link creation and the semester view grouped by course and chapter
"""

import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from upskillnow.core.exceptions import NotFoundError, ValidationError
from upskillnow.models import Note
from upskillnow.schemas.notes import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)


def group_notes(notes: Sequence[Note]) -> List[Dict[str, Any]]:
    """
    Nest notes as course -> chapters -> notes

    Courses and chapters keep the order in which their first note appears.
    """
    courses: Dict[int, Dict[str, Any]] = {}
    chapters: Dict[tuple, Dict[str, Any]] = {}

    for note in notes:
        course = courses.get(note.course_id)
        if course is None:
            course = {"course_id": note.course_id, "course_title": note.course_title, "chapters": []}
            courses[note.course_id] = course

        key = (note.course_id, note.chapter_id)
        chapter = chapters.get(key)
        if chapter is None:
            chapter = {"chapter_id": note.chapter_id, "chapter_title": note.chapter_title, "notes": []}
            chapters[key] = chapter
            course["chapters"].append(chapter)

        chapter["notes"].append(
            {
                "id": note.id,
                "note_title": note.note_title,
                "download_link": note.download_link,
                "file_type": note.file_type,
                "created_at": note.created_at,
            }
        )

    return list(courses.values())


class NoteService:
    @staticmethod
    def add_notes(db: Session, items: Sequence[NoteCreate]) -> List[Note]:
        if not items:
            raise ValidationError("Expecting a non-empty list of notes")

        notes = [Note(**item.model_dump()) for item in items]
        db.add_all(notes)
        db.commit()
        for note in notes:
            db.refresh(note)
        logger.info(f"Added {len(notes)} note link(s)")
        return notes

    @staticmethod
    def semester_notes(db: Session, department: str, year: str, semester: str) -> List[Dict[str, Any]]:
        query = (
            select(Note)
            .where(Note.department == department, Note.year == year, Note.semester == semester)
            .order_by(Note.course_id, Note.chapter_id, Note.id)
        )
        return group_notes(db.execute(query).scalars().all())

    @staticmethod
    def get_note(db: Session, note_id: int) -> Note:
        note = db.get(Note, note_id)
        if not note:
            raise NotFoundError("Note")
        return note

    @staticmethod
    def update_note(db: Session, note_id: int, data: NoteUpdate) -> Note:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            raise ValidationError(
                "No valid fields provided for update. "
                "Only note_title, download_link and file_type are updateable."
            )

        note = NoteService.get_note(db, note_id)
        for field, value in changes.items():
            setattr(note, field, value)
        db.commit()
        db.refresh(note)
        return note

    @staticmethod
    def delete_note(db: Session, note_id: int) -> None:
        note = NoteService.get_note(db, note_id)
        db.delete(note)
        db.commit()


note_service = NoteService()
