"""
Quiz service for UpSkillNow
Quiz authoring, submission scoring and attempt history
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from upskillnow.core.exceptions import NotFoundError
from upskillnow.models import AttemptType, Question, Quiz, QuizAttempt, QuizType, User
from upskillnow.schemas.quizzes import QuestionCreate, QuizCreate, QuizSubmission, QuizUpdate

logger = logging.getLogger(__name__)

CHALLENGE_DEFAULT_DURATION = 20  # minutes
CHALLENGE_DEFAULT_QUESTIONS = 10
QUIZ_LEADERBOARD_SIZE = 10


@dataclass
class ScoreResult:
    correct: int
    total: int
    answers: List[Dict[str, Any]]


def _same_answer(selected: Any, correct: int) -> bool:
    # Strict: a bool or a float never matches an option index
    return type(selected) is int and selected == correct


def score_submission(questions: Sequence[Question], answers: Sequence[Any]) -> ScoreResult:
    """
    Score answers against the quiz's questions by position

    answers[i] is compared with questions[i].correct_answer. Answers past the
    last question are ignored and unanswered questions score nothing; the
    total is always the number of questions.
    """
    evaluated = []
    correct = 0
    for index, question in enumerate(questions):
        selected = answers[index] if index < len(answers) else None
        is_correct = _same_answer(selected, question.correct_answer)
        correct += is_correct
        evaluated.append(
            {"question_id": question.id, "selected_answer": selected, "is_correct": is_correct}
        )
    return ScoreResult(correct=correct, total=len(questions), answers=evaluated)


def attempt_type_for(quiz: Quiz) -> AttemptType:
    """Challenge quizzes feed the weekend leaderboard"""
    if quiz.type == QuizType.CHALLENGE.value:
        return AttemptType.WEEKEND
    return AttemptType.GENERAL


def elapsed_seconds(submission: QuizSubmission, now: Optional[datetime] = None) -> int:
    if submission.time_taken is not None:
        return submission.time_taken
    if submission.started_at is None:
        return 0

    started_at = submission.started_at
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0, int((now - started_at).total_seconds()))


class QuizService:
    """Quiz service"""

    @staticmethod
    def _questions(items: Sequence[QuestionCreate]) -> List[Question]:
        return [Question(**item.model_dump(), position=index) for index, item in enumerate(items)]

    @staticmethod
    def list_quizzes(db: Session) -> List[Quiz]:
        query = select(Quiz).options(selectinload(Quiz.questions)).order_by(Quiz.id)
        return list(db.execute(query).scalars().all())

    @staticmethod
    def get_quiz(db: Session, quiz_id: int) -> Quiz:
        quiz = db.get(Quiz, quiz_id, options=[selectinload(Quiz.questions)])
        if not quiz:
            raise NotFoundError("Quiz")
        return quiz

    @staticmethod
    def get_chapter_quiz(db: Session, chapter_id: int) -> Quiz:
        query = (
            select(Quiz)
            .options(selectinload(Quiz.questions))
            .where(Quiz.chapter_id == chapter_id)
            .order_by(Quiz.id.desc())
        )
        quiz = db.execute(query.limit(1)).scalar_one_or_none()
        if not quiz:
            raise NotFoundError("Quiz")
        return quiz

    @staticmethod
    def create_quiz(db: Session, data: QuizCreate, creator: User) -> Quiz:
        fields = data.model_dump(exclude={"questions"})
        fields["type"] = data.type.value
        if data.type == QuizType.CHALLENGE:
            fields["duration"] = data.duration or CHALLENGE_DEFAULT_DURATION
            fields["num_questions"] = data.num_questions or CHALLENGE_DEFAULT_QUESTIONS

        quiz = Quiz(**fields, created_by=creator.id)
        quiz.questions = QuizService._questions(data.questions)
        db.add(quiz)
        db.commit()
        db.refresh(quiz)
        logger.info(f"Quiz {quiz.id} created by user {creator.id}")
        return quiz

    @staticmethod
    def update_quiz(db: Session, quiz_id: int, data: QuizUpdate) -> Quiz:
        quiz = QuizService.get_quiz(db, quiz_id)
        changes = data.model_dump(exclude_unset=True, exclude={"questions"})
        for field, value in changes.items():
            if value is None:
                continue
            setattr(quiz, field, value.value if isinstance(value, QuizType) else value)

        if data.questions is not None:
            quiz.questions = QuizService._questions(data.questions)

        db.commit()
        db.refresh(quiz)
        return quiz

    @staticmethod
    def delete_quiz(db: Session, quiz_id: int) -> None:
        quiz = QuizService.get_quiz(db, quiz_id)
        db.delete(quiz)
        db.commit()
        logger.info(f"Quiz {quiz_id} deleted")

    @staticmethod
    def submit(db: Session, quiz_id: int, user: User, submission: QuizSubmission) -> QuizAttempt:
        """Score a submission and store it as a new attempt"""
        quiz = QuizService.get_quiz(db, quiz_id)
        result = score_submission(quiz.questions, submission.answers)

        attempt = QuizAttempt(
            quiz_id=quiz.id,
            user_id=user.id,
            answers=result.answers,
            score=result.correct,
            correct_answers=result.correct,
            total_questions=result.total,
            time_taken=elapsed_seconds(submission),
            type=attempt_type_for(quiz).value,
        )
        db.add(attempt)
        db.commit()
        db.refresh(attempt)

        logger.info(
            "Quiz submitted",
            extra={
                "quiz_id": quiz.id,
                "user_id": user.id,
                "score": result.correct,
                "total": result.total,
            },
        )
        return attempt

    @staticmethod
    def quiz_attempts(db: Session, quiz_id: int) -> List[QuizAttempt]:
        QuizService.get_quiz(db, quiz_id)
        query = (
            select(QuizAttempt)
            .where(QuizAttempt.quiz_id == quiz_id)
            .order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc())
        )
        return list(db.execute(query).scalars().all())

    @staticmethod
    def user_attempts(db: Session, user_id: int) -> List[QuizAttempt]:
        query = (
            select(QuizAttempt)
            .where(QuizAttempt.user_id == user_id)
            .order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc())
        )
        return list(db.execute(query).scalars().all())

    @staticmethod
    def get_attempt(db: Session, attempt_id: int) -> QuizAttempt:
        attempt = db.get(QuizAttempt, attempt_id)
        if not attempt:
            raise NotFoundError("Attempt")
        return attempt

    @staticmethod
    def review(attempt: QuizAttempt) -> List[Dict[str, Any]]:
        """Questions of the attempt's quiz merged with what the user picked"""
        picked = {answer["question_id"]: answer for answer in attempt.answers or []}
        review = []
        for question in attempt.quiz.questions:
            answer = picked.get(question.id)
            review.append(
                {
                    "question_id": question.id,
                    "question": question.question,
                    "options": question.options,
                    "user_selected": answer["selected_answer"] if answer else None,
                    "is_correct": answer["is_correct"] if answer else False,
                    "correct_answer": question.correct_answer,
                    "details": question.details,
                }
            )
        return review

    @staticmethod
    def leaderboard(db: Session, quiz_id: int, limit: int = QUIZ_LEADERBOARD_SIZE) -> List[QuizAttempt]:
        """Best attempts on one quiz: highest score first, then fastest"""
        QuizService.get_quiz(db, quiz_id)
        query = (
            select(QuizAttempt)
            .options(selectinload(QuizAttempt.user))
            .where(QuizAttempt.quiz_id == quiz_id)
            .order_by(QuizAttempt.score.desc(), QuizAttempt.time_taken.asc(), QuizAttempt.id.asc())
            .limit(limit)
        )
        return list(db.execute(query).scalars().all())


quiz_service = QuizService()
