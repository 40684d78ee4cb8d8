"""
UpSkillNow Models Package
"""

from upskillnow.models.course import Chapter, Course, Module
from upskillnow.models.note import Note
from upskillnow.models.quiz import AttemptType, Question, Quiz, QuizAttempt, QuizType
from upskillnow.models.user import User, UserRole

__all__ = [
    "User", "UserRole",
    "Course", "Chapter", "Module",
    "Quiz", "Question", "QuizAttempt", "QuizType", "AttemptType",
    "Note",
]
