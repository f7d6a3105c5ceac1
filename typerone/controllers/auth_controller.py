"""
Auth controller — register, login, refresh, logout, me & password reset.

Register, login, refresh and the two password-reset routes are PUBLIC.
Logout and /me require a valid session (access-token cookie).
Tokens travel only in HttpOnly cookies, never in response bodies.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from typerone.core.cache import TokenCache
from typerone.core.database import get_db
from typerone.core.resources import get_mailer, get_token_cache
from typerone.core.responses import ok
from typerone.core.security import (
    REFRESH_TOKEN_COOKIE,
    clear_auth_cookies,
    get_current_user_token,
    set_auth_cookies,
)
from typerone.core.validators import validate_password_reset, validate_registration
from typerone.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    serialize_user,
)
from typerone.services import auth_service
from typerone.services.email_service import Mailer

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    response: Response,
    body: RegisterRequest = Depends(validate_registration),
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    """Create an account and start its first session."""
    result = await auth_service.register_user(
        body.username, body.password, body.email, db, mailer,
    )
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return ok({"user": serialize_user(result.user)})


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate with username + password; replaces any previous session."""
    result = await auth_service.authenticate_user(body.username, body.password, db)
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return ok({"user": serialize_user(result.user)})


@router.post("/refresh")
async def refresh_token(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Exchange the refresh-token cookie for a new access-token cookie."""
    access_token = await auth_service.refresh_access_token(
        request.cookies.get(REFRESH_TOKEN_COOKIE), db,
    )
    set_auth_cookies(response, access_token)
    return ok({"message": "Token refreshed successfully"})


@router.post("/logout")
async def logout(
    response: Response,
    token_payload: dict[str, Any] = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    """Revoke the session server-side and clear both cookies."""
    await auth_service.logout_user(token_payload["user_id"], db)
    clear_auth_cookies(response)
    return ok({"message": "Logged out successfully"})


@router.get("/me")
async def me(
    token_payload: dict[str, Any] = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.get_current_user(token_payload["user_id"], db)
    return ok({"user": serialize_user(user)})


@router.post("/forgot-password")
async def forgot_password(
    body: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
    cache: TokenCache = Depends(get_token_cache),
    mailer: Mailer = Depends(get_mailer),
):
    """Always answers with the same message, whether or not the account exists."""
    message = await auth_service.request_password_reset(body.identifier, db, cache, mailer)
    return ok({"message": message})


@router.post("/reset-password")
async def reset_password(
    body: ResetPasswordRequest = Depends(validate_password_reset),
    db: AsyncSession = Depends(get_db),
    cache: TokenCache = Depends(get_token_cache),
    mailer: Mailer = Depends(get_mailer),
):
    message = await auth_service.reset_password(body.token, body.password, db, cache, mailer)
    return ok({"message": message})
