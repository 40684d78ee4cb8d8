"""
Quiz attempt history endpoints
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from upskillnow.core.database import get_db
from upskillnow.core.security import ensure_owner_or_admin, get_current_user
from upskillnow.models import User
from upskillnow.schemas.quizzes import AttemptDetail, AttemptResponse
from upskillnow.services.quizzes import quiz_service

router = APIRouter()


@router.get("/user/{user_id}", response_model=List[AttemptResponse])
def user_attempts(user_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """A user's attempts, newest first; visible to that user and to admins"""
    ensure_owner_or_admin(current_user, user_id, "Unauthorized access to these attempts")
    return quiz_service.user_attempts(db, user_id)


@router.get("/{attempt_id}", response_model=AttemptDetail)
def get_attempt(attempt_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """One attempt with each question, the chosen option and the right answer"""
    attempt = quiz_service.get_attempt(db, attempt_id)
    ensure_owner_or_admin(current_user, attempt.user_id, "Unauthorized access to this attempt")

    detail = AttemptResponse.model_validate(attempt).model_dump()
    detail["quiz_title"] = attempt.quiz.title
    detail["review_data"] = quiz_service.review(attempt)
    return detail
