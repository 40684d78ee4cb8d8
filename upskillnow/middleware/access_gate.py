"""
Access gate middleware for UpSkillNow Backend
Coarse, path-based authentication and role check run before any handler
"""

import enum
from typing import Callable, FrozenSet, Optional

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from upskillnow.core.config import settings
from upskillnow.core.exceptions import error_body
from upskillnow.core.logging import LoggerFactory
from upskillnow.core.security import TokenClaims, decode_access_token, is_token_revoked
from upskillnow.core.session import read_session_cookie

logger = LoggerFactory.get_security_logger()

LOGIN_PAGE = "/auth"
UNAUTHORIZED_PAGE = "/unauthorized"
HOME_PAGE = "/"

ADMIN_ONLY: FrozenSet[str] = frozenset({"admin"})
STUDENT_OR_ADMIN: FrozenSet[str] = frozenset({"student", "admin"})


class RouteClass(str, enum.Enum):
    PUBLIC = "public"
    PROTECTED_API = "protected-api"
    PROTECTED_PAGE = "protected-page"


def _under(path: str, prefix: str) -> bool:
    """True when path is prefix itself or a sub-path of it"""
    if prefix == "/":
        return path == "/"
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def public_paths() -> tuple:
    api = settings.API_PREFIX
    return (
        HOME_PAGE,
        LOGIN_PAGE,
        UNAUTHORIZED_PAGE,
        f"{api}/auth/login",
        f"{api}/auth/register",
        f"{api}/auth/logout",
        f"{api}/auth/create-admin",
        f"{api}/health",
        "/docs",
        "/redoc",
        "/openapi.json",
    )


def is_api_path(path: str) -> bool:
    return _under(path, settings.API_PREFIX)


def classify(path: str) -> RouteClass:
    if any(_under(path, public) for public in public_paths()):
        return RouteClass.PUBLIC
    if is_api_path(path):
        return RouteClass.PROTECTED_API
    return RouteClass.PROTECTED_PAGE


def required_roles(path: str) -> Optional[FrozenSet[str]]:
    """Roles allowed on a path, or None when any signed-in user may pass"""
    api = settings.API_PREFIX
    if any(_under(path, p) for p in ("/admin", "/admin-dashboard", f"{api}/admin")):
        return ADMIN_ONLY
    if any(_under(path, p) for p in ("/student", "/courses", f"{api}/student", f"{api}/courses")):
        return STUDENT_OR_ADMIN
    return None


async def verify_session_token(token: str) -> Optional[TokenClaims]:
    """Claims for a usable token; any failure at all counts as unauthenticated"""
    try:
        claims = decode_access_token(token)
        if await is_token_revoked(claims):
            return None
        return claims
    except Exception as e:
        logger.info("Session token rejected", extra={"reason": type(e).__name__})
        return None


class AccessGateMiddleware(BaseHTTPMiddleware):
    """
    Decide per request: allow, redirect to login, or reject

    API paths get JSON error envelopes; page paths get redirects. Handlers
    still perform their own role checks before mutating anything.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        route_class = classify(path)
        token = read_session_cookie(request)

        if route_class is RouteClass.PUBLIC:
            # Signed-in users have no business on the login page
            if token and _under(path, LOGIN_PAGE) and await verify_session_token(token):
                return RedirectResponse(HOME_PAGE, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
            return await call_next(request)

        is_api = route_class is RouteClass.PROTECTED_API

        if not token:
            logger.info("No session token", extra={"path": path})
            return self._unauthenticated(request, is_api, "Unauthorized access")

        claims = await verify_session_token(token)
        if claims is None:
            return self._unauthenticated(request, is_api, "Invalid or expired token")

        allowed = required_roles(path)
        if allowed is not None and claims.role not in allowed:
            logger.warning(
                "Role not allowed on path",
                extra={"path": path, "role": claims.role, "user_id": claims.user_id},
            )
            if is_api:
                return JSONResponse(
                    status_code=status.HTTP_403_FORBIDDEN,
                    content=error_body("Forbidden", "AUTHORIZATION_ERROR", request),
                )
            return RedirectResponse(UNAUTHORIZED_PAGE, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

        request.state.token_claims = claims
        return await call_next(request)

    @staticmethod
    def _unauthenticated(request: Request, is_api: bool, message: str) -> Response:
        if is_api:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=error_body(message, "AUTHENTICATION_ERROR", request),
            )
        return RedirectResponse(LOGIN_PAGE, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
