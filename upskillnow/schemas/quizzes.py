"""Quiz, attempt and leaderboard schemas"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from upskillnow.models.quiz import AttemptType, QuizType


class QuestionCreate(BaseModel):
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)
    details: Optional[str] = None

    @model_validator(mode="after")
    def check_answer_index(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer must index one of the options")
        return self


class QuestionResponse(BaseModel):
    id: int
    question: str
    options: List[str]
    correct_answer: int
    details: Optional[str] = None
    position: int

    class Config:
        from_attributes = True


class QuestionPublic(BaseModel):
    """Question as shown to a student taking the quiz"""
    id: int
    question: str
    options: List[str]
    position: int

    class Config:
        from_attributes = True


class QuizCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    chapter_id: int
    description: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    semester: Optional[str] = None
    type: QuizType = QuizType.GENERAL
    duration: Optional[int] = Field(None, gt=0)
    num_questions: Optional[int] = Field(None, gt=0)
    questions: List[QuestionCreate] = Field(..., min_length=1)


class QuizUpdate(BaseModel):
    """
    Fields left out keep their stored value, and the question rows are kept
    unless questions is sent. Sending questions replaces the whole list;
    reviews of attempts made before the replacement then show no selected
    answers, since those answers point at the removed questions.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    chapter_id: Optional[int] = None
    description: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    semester: Optional[str] = None
    type: Optional[QuizType] = None
    duration: Optional[int] = Field(None, gt=0)
    num_questions: Optional[int] = Field(None, gt=0)
    questions: Optional[List[QuestionCreate]] = Field(None, min_length=1)


class QuizBase(BaseModel):
    id: int
    chapter_id: int
    title: str
    description: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    semester: Optional[str] = None
    type: QuizType
    duration: Optional[int] = None
    num_questions: Optional[int] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QuizResponse(QuizBase):
    questions: List[QuestionResponse] = []


class QuizPublic(QuizBase):
    questions: List[QuestionPublic] = []


class QuizSubmission(BaseModel):
    """
    Answers are option indexes aligned with the quiz's question order;
    null marks a skipped question. Values are kept as sent so that only a
    JSON integer can match.
    """
    answers: List[Any]
    time_taken: Optional[int] = Field(None, ge=0)
    started_at: Optional[datetime] = None


class AnswerResult(BaseModel):
    question_id: int
    selected_answer: Any = None
    is_correct: bool


class AttemptResponse(BaseModel):
    id: int
    quiz_id: int
    user_id: int
    answers: List[AnswerResult]
    score: int
    correct_answers: int
    total_questions: int
    time_taken: int
    type: AttemptType
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionResult(BaseModel):
    message: str
    score: int
    total_questions: int
    attempt: AttemptResponse


class ReviewQuestion(BaseModel):
    question_id: int
    question: str
    options: List[str]
    user_selected: Any = None
    is_correct: bool
    correct_answer: int
    details: Optional[str] = None


class AttemptDetail(AttemptResponse):
    quiz_title: str
    review_data: List[ReviewQuestion]


class LeaderboardUser(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class QuizLeaderboardEntry(BaseModel):
    attempt_id: int
    user: LeaderboardUser
    score: int
    correct_answers: int
    total_questions: int
    time_taken: int
    created_at: Optional[datetime] = None


class LeaderboardEntry(BaseModel):
    user: LeaderboardUser
    total_score: int
    total_correct: int
    attempts: int


class WeekendLeaderboardEntry(BaseModel):
    user: LeaderboardUser
    raw_score: int
    total_correct: int
    avg_time: float
    final_score: float
