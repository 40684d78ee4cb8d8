"""Note link schemas"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

FileType = Literal["pdf", "doc", "link", "video", "zip", "other"]


class NoteCreate(BaseModel):
    course_id: int
    chapter_id: int
    department: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)
    semester: str = Field(..., min_length=1)
    course_title: str = Field(..., min_length=1)
    chapter_title: str = Field(..., min_length=1)
    note_title: str = Field(..., min_length=1)
    download_link: str = Field(..., min_length=1)
    file_type: FileType = "pdf"


class NoteUpdate(BaseModel):
    """Only these fields can change once a note exists"""
    note_title: Optional[str] = Field(None, min_length=1)
    download_link: Optional[str] = Field(None, min_length=1)
    file_type: Optional[FileType] = None


class NoteResponse(BaseModel):
    id: int
    course_id: int
    chapter_id: int
    department: str
    year: str
    semester: str
    course_title: str
    chapter_title: str
    note_title: str
    download_link: str
    file_type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotesCreated(BaseModel):
    message: str
    count: int
    notes: List[int]


class NoteEnvelope(BaseModel):
    message: str
    note: NoteResponse


class NoteLink(BaseModel):
    id: int
    note_title: str
    download_link: str
    file_type: str
    created_at: Optional[datetime] = None


class ChapterNotes(BaseModel):
    chapter_id: int
    chapter_title: str
    notes: List[NoteLink]


class CourseNotes(BaseModel):
    course_id: int
    course_title: str
    chapters: List[ChapterNotes]
