"""
API main router
Combines all endpoint routers
"""

from fastapi import APIRouter

from upskillnow.api.endpoints import (
    admin_users,
    athena,
    attempts,
    auth,
    courses,
    health,
    notes,
    quizzes,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(admin_users.router, prefix="/admin/users", tags=["Admin"])
api_router.include_router(courses.router, prefix="/courses", tags=["Courses"])
api_router.include_router(quizzes.router, prefix="/quizzes", tags=["Quizzes"])
api_router.include_router(attempts.router, prefix="/attempts", tags=["Attempts"])
api_router.include_router(notes.router, prefix="/notes", tags=["Notes"])
api_router.include_router(athena.router, prefix="/athena", tags=["Athena"])
