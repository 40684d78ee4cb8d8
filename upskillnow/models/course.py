"""
Course content models for UpSkillNow

Chapters and modules are separate rows keyed to their parent and ordered by
position, so a chapter or module is addressed directly by its own id.
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from upskillnow.core.database import Base

DEPARTMENTS = ("CS", "IT", "DS")
YEARS = ("FY", "SY", "TY")
SEMESTERS = ("SEM1", "SEM2")


class Course(Base):
    """Course model"""
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=False)
    duration = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    full_info = Column(Text, nullable=True)

    department = Column(String, nullable=False, index=True)
    year = Column(String, nullable=False, index=True)
    semester = Column(String, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    chapters = relationship(
        "Chapter",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Chapter.position",
    )


class Chapter(Base):
    """Chapter of a course"""
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    course = relationship("Course", back_populates="chapters")
    modules = relationship(
        "Module",
        back_populates="chapter",
        cascade="all, delete-orphan",
        order_by="Module.position",
    )


class Module(Base):
    """Learning module inside a chapter"""
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, index=True)
    chapter_id = Column(Integer, ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    image = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    chapter = relationship("Chapter", back_populates="modules")
