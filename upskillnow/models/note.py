"""
Note model for UpSkillNow
"""

from sqlalchemy import Column, DateTime, Index, Integer, String
from sqlalchemy.sql import func

from upskillnow.core.database import Base

FILE_TYPES = ("pdf", "doc", "link", "video", "zip", "other")


class Note(Base):
    """Downloadable note link, denormalized with its course and chapter titles"""
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)

    # Plain references: notes live independently of the course tree
    course_id = Column(Integer, nullable=False)
    chapter_id = Column(Integer, nullable=False)

    department = Column(String, nullable=False)
    year = Column(String, nullable=False)
    semester = Column(String, nullable=False)
    course_title = Column(String, nullable=False)
    chapter_title = Column(String, nullable=False)

    note_title = Column(String, nullable=False)
    download_link = Column(String, nullable=False)
    file_type = Column(String, nullable=False, default="pdf")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index("ix_notes_hierarchy", "department", "year", "semester"),
        Index("ix_notes_course_chapter", "course_id", "chapter_id"),
    )
