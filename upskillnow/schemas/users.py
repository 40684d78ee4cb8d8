"""Admin student-management schemas"""

from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from upskillnow.core.config import settings
from upskillnow.schemas.auth import Stream, UserResponse, Year, normalize_email


class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)
    mobile: str = ""
    stream: Stream = ""
    year: Year = ""
    division: str = ""
    gender: str = ""
    profile_image: str = ""

    lower_email = field_validator("email", mode="before")(normalize_email)


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=settings.PASSWORD_MIN_LENGTH)
    mobile: Optional[str] = None
    stream: Optional[Stream] = None
    year: Optional[Year] = None
    division: Optional[str] = None
    gender: Optional[str] = None
    profile_image: Optional[str] = None

    lower_email = field_validator("email", mode="before")(normalize_email)


class StudentList(BaseModel):
    students: List[UserResponse]
    total: int
    page: int
    limit: int


class UserIds(BaseModel):
    ids: List[int] = Field(default_factory=list)


class BulkResult(BaseModel):
    message: str
    count: int


class StudentEnvelope(BaseModel):
    message: str
    student: UserResponse


class StudentDetail(BaseModel):
    student: UserResponse
