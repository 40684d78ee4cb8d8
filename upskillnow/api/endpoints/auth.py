"""
Authentication endpoints
Session cookie login/logout, registration and the caller's own profile
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status
from sqlalchemy.orm import Session

from upskillnow.core.database import get_db
from upskillnow.core.exceptions import AuthenticationError, InternalError, ValidationError
from upskillnow.core.security import (
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    revoke_token,
)
from upskillnow.core.session import clear_session_cookie, read_session_cookie, set_session_cookie
from upskillnow.models import User
from upskillnow.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileEnvelope,
    ProfileUpdate,
    RegisterRequest,
    UserDetail,
    UserEnvelope,
)
from upskillnow.services.auth import auth_service
from upskillnow.services.cloudinary import CloudinaryService, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Check credentials, issue a session token and set it as a cookie"""
    user = auth_service.authenticate(db, credentials.email, credentials.password)
    token = create_access_token(user)
    set_session_cookie(response, token)

    logger.info(f"User {user.id} logged in")
    return {"message": "Login successful", "user": user, "token": token}


@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new student"""
    user = auth_service.register(db, data)
    return {"message": "Registered successfully", "user": user}


@router.post("/create-admin", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_admin(
    data: RegisterRequest,
    caller: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Create an admin (by an admin, or the very first one)"""
    user = auth_service.create_admin(db, data, caller)
    return {"message": "Admin created successfully", "user": user}


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response):
    """Clear the session cookie, and deny-list the token when revocation is on"""
    token = read_session_cookie(request)
    if token:
        try:
            await revoke_token(decode_access_token(token))
        except AuthenticationError:
            pass  # an unusable token needs no revoking
    clear_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserDetail)
def me(current_user: User = Depends(get_current_user)):
    """Get current user"""
    return {"user": current_user}


@router.put("/update", response_model=ProfileEnvelope)
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the caller's own profile"""
    if not data.model_dump(exclude_unset=True):
        return {"message": "No changes submitted", "student": current_user}

    user = auth_service.update_profile(db, current_user, data)
    return {"message": "Profile updated successfully", "student": user}


@router.post("/profile-image", response_model=ProfileEnvelope)
def upload_profile_image(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    storage: CloudinaryService = Depends(get_storage),
    db: Session = Depends(get_db),
):
    """Upload a new profile picture to the caller's media folder"""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Profile image must be a JPEG, PNG, WebP or GIF file")

    url = storage.upload_profile_image(file.file, current_user.id)
    if not url:
        raise InternalError("Image upload failed")

    user = auth_service.set_profile_image(db, current_user, url)
    return {"message": "Profile image updated", "student": user}
