"""Authentication and profile schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from upskillnow.core.config import settings
from upskillnow.models.user import UserRole

Stream = Literal["CS", "IT", "DS", ""]
Year = Literal["FY", "SY", "TY", ""]

MALE_DEFAULT_IMAGE = "/images/defaults/maleDefaultProfile.png"
FEMALE_DEFAULT_IMAGE = "/images/defaults/femaleDefaultProfile.png"
NEUTRAL_DEFAULT_IMAGE = "/images/defaults/defaultProfile.png"


def default_profile_image(gender: Optional[str]) -> str:
    """Placeholder avatar for users who never uploaded one"""
    gender = (gender or "").strip().lower()
    if gender == "male":
        return MALE_DEFAULT_IMAGE
    if gender == "female":
        return FEMALE_DEFAULT_IMAGE
    return NEUTRAL_DEFAULT_IMAGE


def normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    lower_email = field_validator("email", mode="before")(normalize_email)


class RegisterRequest(BaseModel):
    """Self-registration; any role sent by the client is ignored"""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)

    lower_email = field_validator("email", mode="before")(normalize_email)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    mobile: Optional[str] = None
    stream: Optional[Stream] = None
    year: Optional[Year] = None
    division: Optional[str] = None
    gender: Optional[str] = None
    profile_image: Optional[str] = None
    password: Optional[str] = Field(None, min_length=settings.PASSWORD_MIN_LENGTH)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    profile_image: Optional[str] = None
    mobile: Optional[str] = ""
    stream: Optional[str] = ""
    year: Optional[str] = ""
    division: Optional[str] = ""
    gender: Optional[str] = ""
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def fill_default_image(self):
        if not self.profile_image:
            self.profile_image = default_profile_image(self.gender)
        return self


class LoginUser(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    message: str
    user: LoginUser
    token: str


class UserEnvelope(BaseModel):
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


class UserDetail(BaseModel):
    user: UserResponse


class ProfileEnvelope(BaseModel):
    message: str
    student: UserResponse
