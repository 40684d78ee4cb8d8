"""
Leaderboard service
Aggregates quiz attempts per user
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from upskillnow.models import AttemptType, QuizAttempt, User

LEADERBOARD_SIZE = 20


def _user(row) -> Dict[str, Any]:
    return {"id": row.user_id, "name": row.name, "email": row.email}


class LeaderboardService:
    """Global, general and weekend rankings"""

    @staticmethod
    def _totals(db: Session, attempt_type: Optional[AttemptType], limit: int) -> List[Dict[str, Any]]:
        total_score = func.sum(QuizAttempt.score).label("total_score")
        total_correct = func.sum(QuizAttempt.correct_answers).label("total_correct")
        query = (
            select(
                QuizAttempt.user_id,
                User.name,
                User.email,
                total_score,
                total_correct,
                func.count(QuizAttempt.id).label("attempts"),
            )
            .join(User, User.id == QuizAttempt.user_id)
            .group_by(QuizAttempt.user_id, User.name, User.email)
        )
        if attempt_type is not None:
            query = query.where(QuizAttempt.type == attempt_type.value)
            query = query.order_by(total_score.desc(), total_correct.desc(), QuizAttempt.user_id)
        else:
            query = query.order_by(total_score.desc(), QuizAttempt.user_id)

        return [
            {
                "user": _user(row),
                "total_score": row.total_score or 0,
                "total_correct": row.total_correct or 0,
                "attempts": row.attempts,
            }
            for row in db.execute(query.limit(limit))
        ]

    @staticmethod
    def global_board(db: Session, limit: int = LEADERBOARD_SIZE) -> List[Dict[str, Any]]:
        """Sum of scores across every attempt"""
        return LeaderboardService._totals(db, None, limit)

    @staticmethod
    def general_board(db: Session, limit: int = LEADERBOARD_SIZE) -> List[Dict[str, Any]]:
        """General attempts only; ties broken by total correct answers"""
        return LeaderboardService._totals(db, AttemptType.GENERAL, limit)

    @staticmethod
    def weekend_board(db: Session, limit: int = LEADERBOARD_SIZE) -> List[Dict[str, Any]]:
        """
        Weekend challenge ranking

        final_score = sum(score) - avg(time_taken) / 60, so every minute of
        average solving time costs one point.
        """
        score_sum = func.sum(QuizAttempt.score)
        time_avg = func.avg(QuizAttempt.time_taken)
        raw_score = score_sum.label("raw_score")
        avg_time = time_avg.label("avg_time")
        final_score = (score_sum - time_avg / 60.0).label("final_score")
        query = (
            select(
                QuizAttempt.user_id,
                User.name,
                User.email,
                raw_score,
                func.sum(QuizAttempt.correct_answers).label("total_correct"),
                avg_time,
                final_score,
            )
            .join(User, User.id == QuizAttempt.user_id)
            .where(QuizAttempt.type == AttemptType.WEEKEND.value)
            .group_by(QuizAttempt.user_id, User.name, User.email)
            .order_by(final_score.desc(), QuizAttempt.user_id)
            .limit(limit)
        )

        return [
            {
                "user": _user(row),
                "raw_score": row.raw_score or 0,
                "total_correct": row.total_correct or 0,
                "avg_time": float(row.avg_time or 0),
                "final_score": float(row.final_score or 0),
            }
            for row in db.execute(query)
        ]


leaderboard_service = LeaderboardService()
