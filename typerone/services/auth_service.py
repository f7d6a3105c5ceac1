"""
Authentication service.

Handles:
- Registration (uniqueness, hashing, first session)
- Login with single-active-session enforcement
- Logout (server-side session revocation)
- Access-token refresh
- Password reset: request (forgot) and redemption (reset)

Session rules:
- Every successful login/registration writes a fresh random
  ``session_token`` on the user row and embeds it in both JWTs.
  Tokens whose session_id no longer matches are rejected, so a new
  login revokes every token issued before it and logout revokes all.
- Refresh only mints a new access token; it never rotates the session.

Password-reset rules:
- Only the SHA-256 hash of a reset token is stored, under
  ``password_reset:<hash>`` → user id, together with
  ``password_reset_email:<email>`` → hash for rate limiting.  Both keys
  share the same TTL and are written in one transaction.
- While the email key exists, further requests are acknowledged but
  generate nothing.
- Responses never reveal whether an account exists.  If the reset email
  cannot be sent, both keys are dropped and the generic answer returned.
- Redemption deletes both keys, making the token single-use.
  A reset does NOT revoke existing sessions.

All business logic lives here — controllers call service methods
and turn the result into a response.
"""

import asyncio
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from typerone.core.cache import TokenCache, password_reset_email_key, password_reset_key
from typerone.core.config import settings
from typerone.core.errors import AppError
from typerone.core.security import (
    build_token_payload,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    generate_reset_token,
    generate_session_id,
    hash_token,
    verify_password,
)
from typerone.models.user import User
from typerone.services import email_service, user_service
from typerone.services.email_service import Mailer

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_CREDENTIALS = "Invalid credentials"
FORGOT_PASSWORD_MESSAGE = (
    "If an account exists with that username or email, a password reset link has been sent."
)
RESET_PASSWORD_MESSAGE = (
    "Password has been reset successfully. You can now login with your new password."
)
INVALID_RESET_TOKEN = "Invalid or expired reset token. Please request a new password reset."


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str


def _issue_tokens(user: User, session_id: str) -> tuple[str, str]:
    payload = build_token_payload(user, session_id)
    return create_access_token(payload), create_refresh_token(payload)


def _parse_user_id(raw: Any) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


# ── Register ─────────────────────────────────────────────────────────

async def register_user(
    username: str,
    password: str,
    email: str | None,
    db: AsyncSession,
    mailer: Mailer | None = None,
) -> AuthResult:
    """
    Create the account and log it in.

    The pre-check gives a friendly error naming the colliding field(s);
    the unique indexes settle concurrent registrations — whichever
    insert loses is reported the same way.
    """
    conflicts = await user_service.find_conflicts(username, email, db)
    if conflicts:
        raise AppError.conflict(_conflict_message(conflicts), conflicts)

    session_id = generate_session_id()
    try:
        user = await user_service.create_user(
            db,
            username=username,
            password=password,
            email=email,
            session_token=session_id,
        )
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        field = user_service.duplicate_field(exc)
        logger.info("Registration race lost for %r (%s)", username, field)
        details = {field: [f"{field.capitalize()} already exists"]}
        raise AppError.conflict(_conflict_message(details), details)

    access_token, refresh_token = _issue_tokens(user, session_id)
    logger.info("User registered: %s (%s)", user.username, user.id)

    if mailer is not None and user.email:
        try:
            await email_service.send_welcome_email(
                mailer, app_name=settings.APP_NAME, to_email=user.email, username=user.username,
            )
        except Exception:
            # The account exists either way; a missing welcome mail is not fatal.
            logger.exception("Welcome email failed for %s", user.id)

    return AuthResult(user=user, access_token=access_token, refresh_token=refresh_token)


def _conflict_message(conflicts: dict[str, list[str]]) -> str:
    if "username" in conflicts:
        return "Username already exists"
    if "email" in conflicts:
        return "Email already exists"
    return "Resource conflict"


# ── Login ────────────────────────────────────────────────────────────

async def authenticate_user(username: str, password: str, db: AsyncSession) -> AuthResult:
    """
    Validate credentials, start a new session (revoking the previous
    one) and return access + refresh tokens.
    """
    user = await user_service.get_user_by_username(
        username, db, with_password=True, with_session=True,
    )

    # Same message for unknown user and wrong password.
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for username %r", username)
        raise AppError.unauthorized(INVALID_CREDENTIALS)

    if not user.is_active:
        raise AppError.unauthorized("Account is inactive")

    session_id = generate_session_id()
    user.session_token = session_id
    user_service.touch_last_login(user)
    await db.commit()

    access_token, refresh_token = _issue_tokens(user, session_id)
    logger.info("User logged in: %s", user.id)
    return AuthResult(user=user, access_token=access_token, refresh_token=refresh_token)


# ── Logout ───────────────────────────────────────────────────────────

async def logout_user(user_id: str, db: AsyncSession) -> None:
    """Clear the stored session; every outstanding token stops working."""
    parsed = _parse_user_id(user_id)
    user = await user_service.get_user_by_id(parsed, db, with_session=True) if parsed else None
    if user is None:
        return
    user.session_token = None
    await db.commit()
    logger.info("User logged out: %s", user.id)


# ── Refresh ──────────────────────────────────────────────────────────

async def refresh_access_token(refresh_token_raw: str | None, db: AsyncSession) -> str:
    """Validate a refresh token against the live session; mint an access token."""
    if not refresh_token_raw:
        raise AppError.unauthorized("Refresh token not found")

    payload = decode_refresh_token(refresh_token_raw)

    user_id = _parse_user_id(payload["user_id"])
    user = await user_service.get_user_by_id(user_id, db, with_session=True) if user_id else None
    if user is None or user.session_token != payload["session_id"]:
        raise AppError.unauthorized("Session expired or invalid")

    return create_access_token({
        "user_id": payload["user_id"],
        "username": payload["username"],
        "role": payload["role"],
        "session_id": payload["session_id"],
    })


# ── Current user ─────────────────────────────────────────────────────

async def get_current_user(user_id: str, db: AsyncSession) -> User:
    parsed = _parse_user_id(user_id)
    user = await user_service.get_user_by_id(parsed, db) if parsed else None
    if user is None:
        raise AppError.not_found("User not found")
    return user


# ── Forgot password ──────────────────────────────────────────────────

async def request_password_reset(
    identifier: str,
    db: AsyncSession,
    cache: TokenCache,
    mailer: Mailer,
) -> str:
    """
    Issue a reset token and email it.  Always returns the same generic
    message, whatever happened.
    """
    identifier = identifier.strip()
    if EMAIL_RE.match(identifier):
        user = await user_service.get_user_by_email(identifier, db)
    else:
        user = await user_service.get_user_by_username(identifier, db)

    if user is None or not user.is_active or not user.email:
        logger.info("Password reset requested for unknown or unusable account")
        return FORGOT_PASSWORD_MESSAGE

    email_key = password_reset_email_key(user.email)
    if await cache.get(email_key):
        logger.info("Password reset already pending for user %s, not resending", user.id)
        return FORGOT_PASSWORD_MESSAGE

    reset_token, hashed_token = generate_reset_token()
    token_key = password_reset_key(hashed_token)
    await cache.set_many(
        {token_key: str(user.id), email_key: hashed_token},
        settings.PASSWORD_RESET_TTL_SECONDS,
    )

    reset_link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={reset_token}"
    try:
        await email_service.send_password_reset_email(
            mailer,
            app_name=settings.APP_NAME,
            to_email=user.email,
            username=user.username,
            reset_link=reset_link,
            ttl_minutes=max(1, settings.PASSWORD_RESET_TTL_SECONDS // 60),
        )
    except Exception:
        # Undelivered token: drop it so the next request can issue a new one.
        # The caller still gets the generic answer.
        logger.exception("Password reset email failed for user %s", user.id)
        await cache.delete(token_key, email_key)
        return FORGOT_PASSWORD_MESSAGE

    logger.info("Password reset token issued for user %s", user.id)
    return FORGOT_PASSWORD_MESSAGE


# ── Reset password ───────────────────────────────────────────────────

async def reset_password(
    token: str,
    new_password: str,
    db: AsyncSession,
    cache: TokenCache,
    mailer: Mailer,
) -> str:
    """
    Redeem a reset token.  The token is consumed only after the new
    password is committed.
    """
    hashed_token = hash_token(token)
    token_key = password_reset_key(hashed_token)

    raw_user_id = await cache.get(token_key)
    user_id = _parse_user_id(raw_user_id) if raw_user_id else None
    if user_id is None:
        raise AppError.bad_request(INVALID_RESET_TOKEN)

    user = await user_service.get_user_by_id(user_id, db, with_password=True)
    if user is None or not user.is_active:
        raise AppError.not_found("User not found")

    user_service.set_password(user, new_password)
    await db.commit()

    keys = [token_key]
    if user.email:
        keys.append(password_reset_email_key(user.email))
    await asyncio.gather(*(cache.delete(key) for key in keys))
    logger.info("Password reset completed for user %s", user.id)

    if user.email:
        await email_service.send_password_changed_email(
            mailer, app_name=settings.APP_NAME, to_email=user.email, username=user.username,
        )

    return RESET_PASSWORD_MESSAGE
