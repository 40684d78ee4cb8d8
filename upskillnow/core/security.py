"""
Security utilities for authentication and authorization
Handles password hashing, session tokens and per-handler role checks
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from upskillnow.core.config import settings
from upskillnow.core.database import get_db
from upskillnow.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from upskillnow.core.session import read_session_cookie
from upskillnow.db.redis import cache
from upskillnow.models import User, UserRole

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

ROLE_VALUES = {role.value for role in UserRole}


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its bcrypt hash (constant time)"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or corrupt hash
        return False


def dummy_verify_password() -> None:
    """Spend the same time as a real verification when there is no user to check"""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


@dataclass(frozen=True)
class TokenClaims:
    """Decoded session token"""

    user_id: int
    role: str
    issued_at: datetime
    expires_at: datetime
    token_id: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def remaining_seconds(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        return max(0, int((self.expires_at - now).total_seconds()))


def create_access_token(user: User, now: Optional[datetime] = None) -> str:
    """
    Issue a signed session token for a user

    Args:
        user: Authenticated user
        now: Issue time, defaults to the current UTC time

    Returns:
        Encoded JWT carrying sub, role, iat, exp and jti
    """
    issued_at = now or datetime.now(timezone.utc)
    expire = issued_at + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS)
    role = user.role.value if isinstance(user.role, UserRole) else str(user.role)

    to_encode = {
        "sub": str(user.id),
        "role": role,
        "iat": int(issued_at.timestamp()),
        "exp": int(expire.timestamp()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify a session token

    Args:
        token: Encoded JWT

    Returns:
        Decoded claims

    Raises:
        MalformedTokenError: token cannot be parsed or lacks sub/role/exp
        InvalidSignatureError: signature does not verify
        TokenExpiredError: signature is valid but exp has passed
    """
    try:
        jwt.get_unverified_claims(token)
    except (JWTError, AttributeError, TypeError):
        raise MalformedTokenError()

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidSignatureError()

    sub, role, exp = payload.get("sub"), payload.get("role"), payload.get("exp")
    if sub is None or role not in ROLE_VALUES or exp is None:
        raise MalformedTokenError("Token is missing required claims")

    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise MalformedTokenError("Token subject is not a user id")

    return TokenClaims(
        user_id=user_id,
        role=role,
        issued_at=datetime.fromtimestamp(payload.get("iat", exp), tz=timezone.utc),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        token_id=payload.get("jti") or "",
    )


def _revocation_key(token_id: str) -> str:
    return f"revoked_token:{token_id}"


async def revoke_token(claims: TokenClaims) -> bool:
    """Put a token on the denylist for the rest of its lifetime"""
    if not settings.TOKEN_REVOCATION_ENABLED or not claims.token_id:
        return False
    ttl = claims.remaining_seconds()
    if ttl <= 0:
        return False
    return await cache.set(_revocation_key(claims.token_id), "1", ttl=ttl)


async def is_token_revoked(claims: TokenClaims) -> bool:
    if not settings.TOKEN_REVOCATION_ENABLED or not claims.token_id:
        return False
    return await cache.get(_revocation_key(claims.token_id)) is not None


async def get_token_claims(request: Request) -> TokenClaims:
    """Dependency: verified claims of the caller's session token"""
    token = read_session_cookie(request)
    if not token:
        raise AuthenticationError("Not authenticated")

    claims = decode_access_token(token)
    if await is_token_revoked(claims):
        raise AuthenticationError("Token has been revoked")
    return claims


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims), db: Session = Depends(get_db)
) -> User:
    """Dependency: the stored user behind the session token"""
    user = db.get(User, claims.user_id)
    if not user or user.is_deleted:
        raise AuthenticationError("User no longer exists")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to require the admin role, checked against the stored user"""
    if current_user.role != UserRole.ADMIN:
        logger.warning(
            "Admin action refused",
            extra={"user_id": current_user.id, "role": current_user.role.value},
        )
        raise AuthorizationError("Admin access required")
    return current_user


def ensure_owner_or_admin(current_user: User, owner_id: int, message: str = "Forbidden") -> None:
    """Allow the resource owner or any admin"""
    if current_user.id != owner_id and current_user.role != UserRole.ADMIN:
        raise AuthorizationError(message)


async def get_optional_claims(request: Request) -> Optional[TokenClaims]:
    """Dependency for public routes that behave differently for signed-in callers"""
    token = read_session_cookie(request)
    if not token:
        return None
    try:
        claims = decode_access_token(token)
    except AuthenticationError:
        return None
    if await is_token_revoked(claims):
        return None
    return claims


def get_optional_user(
    claims: Optional[TokenClaims] = Depends(get_optional_claims), db: Session = Depends(get_db)
) -> Optional[User]:
    if claims is None:
        return None
    user = db.get(User, claims.user_id)
    if not user or user.is_deleted:
        return None
    return user
