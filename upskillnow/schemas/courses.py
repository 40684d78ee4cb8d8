"""Course, chapter and module schemas"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

Department = Literal["CS", "IT", "DS"]
CourseYear = Literal["FY", "SY", "TY"]
Semester = Literal["SEM1", "SEM2"]


class ModuleCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    image: Optional[str] = None


class ModuleUpdate(BaseModel):
    """Fields left out keep their stored value"""
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None


class ModuleResponse(BaseModel):
    id: int
    chapter_id: int
    title: str
    content: str
    image: Optional[str] = None
    position: int

    class Config:
        from_attributes = True


class ChapterCreate(BaseModel):
    title: str = Field(..., min_length=1)
    modules: List[ModuleCreate] = []


class ChapterUpdate(BaseModel):
    title: str = Field(..., min_length=1)


class ChapterResponse(BaseModel):
    id: int
    course_id: int
    title: str
    position: int
    modules: List[ModuleResponse] = []

    class Config:
        from_attributes = True


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    full_info: Optional[str] = None
    department: Department
    year: CourseYear
    semester: Semester
    chapters: List[ChapterCreate] = []

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    image: Optional[str] = None
    duration: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    full_info: Optional[str] = None
    department: Optional[Department] = None
    year: Optional[CourseYear] = None
    semester: Optional[Semester] = None


class CourseSummary(BaseModel):
    id: int
    title: str
    description: str
    image: str
    duration: str
    department: str
    year: str
    semester: str

    class Config:
        from_attributes = True


class CourseResponse(CourseSummary):
    start_date: date
    end_date: date
    full_info: Optional[str] = None
    chapters: List[ChapterResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
