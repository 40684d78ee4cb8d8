"""
Session cookie handling
The session token travels in an HTTP-only cookie
"""

from typing import Optional

from fastapi import Request, Response

from upskillnow.core.config import settings


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token cookie"""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.is_production(),
    )


def clear_session_cookie(response: Response) -> None:
    """Overwrite the cookie with an empty value that expires immediately"""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.is_production(),
    )


def read_session_cookie(request: Request) -> Optional[str]:
    """Raw cookie value, or None when absent or empty"""
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None
