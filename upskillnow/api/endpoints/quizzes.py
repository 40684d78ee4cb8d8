"""
Quiz endpoints
"""

from typing import List, Union

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from upskillnow.core.database import get_db
from upskillnow.core.security import get_current_user, require_admin
from upskillnow.models import Quiz, User
from upskillnow.schemas.auth import MessageResponse
from upskillnow.schemas.quizzes import (
    AttemptResponse,
    LeaderboardEntry,
    QuizCreate,
    QuizLeaderboardEntry,
    QuizPublic,
    QuizResponse,
    QuizSubmission,
    QuizUpdate,
    SubmissionResult,
    WeekendLeaderboardEntry,
)
from upskillnow.services.leaderboard import leaderboard_service
from upskillnow.services.quizzes import quiz_service

router = APIRouter()

QuizView = Union[QuizResponse, QuizPublic]


def present(quiz: Quiz, user: User) -> QuizView:
    """Admins see answers and explanations, students only the questions"""
    if user.is_admin:
        return QuizResponse.model_validate(quiz)
    return QuizPublic.model_validate(quiz)


@router.get("/", response_model=List[QuizView])
def list_quizzes(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [present(quiz, user) for quiz in quiz_service.list_quizzes(db)]


@router.get("/leaderboard/global", response_model=List[LeaderboardEntry])
def global_leaderboard(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Top 20 users by total score over all attempts"""
    return leaderboard_service.global_board(db)


@router.get("/leaderboard/general", response_model=List[LeaderboardEntry])
def general_leaderboard(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Top 20 users on general quizzes"""
    return leaderboard_service.general_board(db)


@router.get("/leaderboard/weekend", response_model=List[WeekendLeaderboardEntry])
def weekend_leaderboard(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Top 20 users on weekend challenges, with a time penalty"""
    return leaderboard_service.weekend_board(db)


@router.get("/chapter/{chapter_id}", response_model=QuizView)
def get_chapter_quiz(
    chapter_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """The quiz attached to a chapter"""
    return present(quiz_service.get_chapter_quiz(db, chapter_id), user)


@router.get("/{quiz_id}", response_model=QuizView)
def get_quiz(quiz_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return present(quiz_service.get_quiz(db, quiz_id), user)


@router.post("/", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
def create_quiz(data: QuizCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Create new quiz (admins only)"""
    return quiz_service.create_quiz(db, data, admin)


@router.put("/{quiz_id}", response_model=QuizResponse)
def update_quiz(
    quiz_id: int,
    data: QuizUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return quiz_service.update_quiz(db, quiz_id, data)


@router.delete("/{quiz_id}", response_model=MessageResponse)
def delete_quiz(quiz_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    quiz_service.delete_quiz(db, quiz_id)
    return {"message": "Quiz deleted successfully"}


@router.post("/{quiz_id}/submit", response_model=SubmissionResult)
def submit_quiz(
    quiz_id: int,
    submission: QuizSubmission,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Score the caller's answers on the server and record the attempt"""
    attempt = quiz_service.submit(db, quiz_id, user, submission)
    return {
        "message": "Quiz submitted successfully",
        "score": attempt.score,
        "total_questions": attempt.total_questions,
        "attempt": attempt,
    }


@router.get("/{quiz_id}/attempts", response_model=List[AttemptResponse])
def quiz_attempts(quiz_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Every attempt on a quiz, newest first"""
    return quiz_service.quiz_attempts(db, quiz_id)


@router.get("/{quiz_id}/leaderboard", response_model=List[QuizLeaderboardEntry])
def quiz_leaderboard(quiz_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [
        {
            "attempt_id": attempt.id,
            "user": attempt.user,
            "score": attempt.score,
            "correct_answers": attempt.correct_answers,
            "total_questions": attempt.total_questions,
            "time_taken": attempt.time_taken,
            "created_at": attempt.created_at,
        }
        for attempt in quiz_service.leaderboard(db, quiz_id)
    ]
