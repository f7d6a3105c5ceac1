"""
Password hashing, token helpers & the authentication guard.

- Passwords are hashed with bcrypt directly (passlib is unmaintained
  and broken with bcrypt>=4.1).
- Access and refresh JWTs carry user_id, username, role and the
  session_id.  Both are signed with the same secret and told apart by
  a ``type`` claim.
- Verification is stateless (signature + expiry) *plus* a cross-check
  of the embedded session_id against ``users.session_token`` on EVERY
  protected request, so logout and a new login revoke every token
  issued before them.
- Password-reset tokens are random secrets; only their SHA-256 hash is
  ever stored.
"""

import hashlib
import logging
import re
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from typerone.core.config import settings
from typerone.core.database import get_db
from typerone.core.errors import AppError
from typerone.models.user import User

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

DEFAULT_EXPIRY_SECONDS = 900

_EXPIRY_RE = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 60 * 60, "d": 60 * 60 * 24}


# ── Password hashing ────────────────────────────────────────────────


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash counts as a mismatch.
        return False


# ── Opaque secrets ──────────────────────────────────────────────────


def generate_session_id() -> str:
    """256 bits of randomness, hex encoded."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """SHA-256 hash — suitable for high-entropy tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> tuple[str, str]:
    """Return ``(token, hashed_token)``.  Only the hash may be persisted."""
    token = secrets.token_hex(32)
    return token, hash_token(token)


# ── Expiry strings ──────────────────────────────────────────────────


def parse_expiry(expiry: str) -> int:
    """Turn ``"15m"`` / ``"7d"`` / ``"30s"`` / ``"12h"`` into seconds.

    Anything else falls back to 15 minutes.
    """
    match = _EXPIRY_RE.match(expiry or "")
    if match is None:
        return DEFAULT_EXPIRY_SECONDS
    value, unit = match.groups()
    return int(value) * _UNIT_SECONDS[unit]


# ── JWT ──────────────────────────────────────────────────────────────


def build_token_payload(user: User, session_id: str) -> dict[str, Any]:
    return {
        "user_id": str(user.id),
        "username": user.username,
        "role": user.role.value,
        "session_id": session_id,
    }


def _encode(data: dict[str, Any], token_type: str, expiry: str) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "user_id": data["user_id"],
        "username": data["username"],
        "role": data["role"],
        "session_id": data["session_id"],
        "sub": data["user_id"],
        "type": token_type,
        "iat": now,
        "exp": now + timedelta(seconds=parse_expiry(expiry)),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    return _encode(data, ACCESS_TOKEN_TYPE, settings.JWT_ACCESS_TOKEN_EXPIRY)


def create_refresh_token(data: dict[str, Any]) -> str:
    return _encode(data, REFRESH_TOKEN_TYPE, settings.JWT_REFRESH_TOKEN_EXPIRY)


def _decode(token: str, token_type: str, message: str) -> dict[str, Any]:
    """Signature, expiry and type check.  Every failure looks the same."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AppError.unauthorized(message)

    if payload.get("type") != token_type:
        raise AppError.unauthorized(message)
    if not payload.get("user_id") or not payload.get("session_id"):
        raise AppError.unauthorized(message)
    return payload


def decode_access_token(token: str) -> dict[str, Any]:
    return _decode(token, ACCESS_TOKEN_TYPE, "Invalid or expired access token")


def decode_refresh_token(token: str) -> dict[str, Any]:
    return _decode(token, REFRESH_TOKEN_TYPE, "Invalid or expired refresh token")


def claims_from_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Strip registered claims, keeping what downstream handlers use."""
    return {
        "user_id": payload["user_id"],
        "username": payload.get("username"),
        "role": payload.get("role"),
        "session_id": payload["session_id"],
    }


# ── Cookies ──────────────────────────────────────────────────────────


def _cookie_options(max_age: int) -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "strict",
        "domain": settings.COOKIE_DOMAIN or None,
        "path": "/",
        "max_age": max_age,
    }


def access_cookie_options() -> dict[str, Any]:
    return _cookie_options(parse_expiry(settings.JWT_ACCESS_TOKEN_EXPIRY))


def refresh_cookie_options() -> dict[str, Any]:
    return _cookie_options(parse_expiry(settings.JWT_REFRESH_TOKEN_EXPIRY))


def set_auth_cookies(response: Response, access_token: str, refresh_token: str | None = None) -> None:
    response.set_cookie(ACCESS_TOKEN_COOKIE, access_token, **access_cookie_options())
    if refresh_token is not None:
        response.set_cookie(REFRESH_TOKEN_COOKIE, refresh_token, **refresh_cookie_options())


def clear_auth_cookies(response: Response) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            domain=settings.COOKIE_DOMAIN or None,
            secure=settings.is_production,
            httponly=True,
            samesite="strict",
        )


# ── Per-request session validation ──────────────────────────────────


async def get_current_user_token(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """
    FastAPI dependency — decodes the access-token cookie **and**
    validates it against the user's current session.

    Checks performed on every protected request:
      1. Cookie present.
      2. JWT signature, expiry and token type.
      3. User still exists.
      4. session_id in the JWT equals ``users.session_token``.
      5. Account is active.

    On success the claims are attached to ``request.state.user`` and
    returned.
    """
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise AppError.unauthorized("Access token not found")

    payload = decode_access_token(token)

    try:
        user_id = uuid.UUID(payload["user_id"])
    except ValueError:
        raise AppError.unauthorized("Invalid or expired access token")

    stmt = select(User).options(undefer(User.session_token)).where(User.id == user_id)
    user = (await db.execute(stmt)).scalar_one_or_none()

    if user is None:
        raise AppError.unauthorized("User not found")

    if user.session_token is None or not secrets.compare_digest(
        user.session_token, payload["session_id"]
    ):
        raise AppError.unauthorized("Session expired or logged in from another device")

    if not user.is_active:
        raise AppError.unauthorized("Account is inactive")

    claims = claims_from_payload(payload)
    request.state.user = claims
    return claims
