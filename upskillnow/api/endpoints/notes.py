"""
Notes endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from upskillnow.core.database import get_db
from upskillnow.core.exceptions import ValidationError
from upskillnow.core.security import get_current_user, require_admin
from upskillnow.models import User
from upskillnow.schemas.auth import MessageResponse
from upskillnow.schemas.notes import CourseNotes, NoteCreate, NoteEnvelope, NotesCreated, NoteUpdate
from upskillnow.services.notes import note_service

router = APIRouter()


@router.post("/", response_model=NotesCreated, status_code=status.HTTP_201_CREATED)
def add_notes(notes: List[NoteCreate], admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Add one or more note links"""
    created = note_service.add_notes(db, notes)
    return {
        "message": f"{len(created)} note link(s) added successfully",
        "count": len(created),
        "notes": [note.id for note in created],
    }


@router.get("/", response_model=List[CourseNotes])
def get_notes(
    dep: Optional[str] = None,
    year: Optional[str] = None,
    sem: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Notes of one semester grouped by course and chapter"""
    if not (dep and year and sem):
        raise ValidationError("Missing required query parameters: dep, year and sem")
    return note_service.semester_notes(db, dep, year, sem)


@router.patch("/{note_id}", response_model=NoteEnvelope)
def update_note(
    note_id: int,
    data: NoteUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Change a note's title, link or file type"""
    note = note_service.update_note(db, note_id, data)
    return {"message": f"Note {note_id} updated successfully", "note": note}


@router.delete("/{note_id}", response_model=MessageResponse)
def delete_note(note_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    note_service.delete_note(db, note_id)
    return {"message": f"Note {note_id} deleted successfully"}
