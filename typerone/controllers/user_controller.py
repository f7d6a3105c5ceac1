"""
User controller — public profiles & self-service account management.

GET /{user_id} is PUBLIC.  Everything else acts on the caller's own
account and requires a valid session.  Settings, achievements and
history are placeholders until typing results are persisted.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from typerone.core.database import get_db
from typerone.core.errors import AppError
from typerone.core.responses import ok
from typerone.core.security import clear_auth_cookies, get_current_user_token
from typerone.core.validators import validate_password_change
from typerone.schemas import (
    ChangePasswordRequest,
    DeleteAccountRequest,
    UpdateProfileRequest,
    UpdateSettingsRequest,
    serialize_user,
)
from typerone.services import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])

DEFAULT_SETTINGS = {
    "theme": "dark",
    "soundEnabled": True,
    "difficulty": "medium",
    "language": "en",
    "showKeyboard": False,
    "blindMode": False,
    "quickTab": True,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ── Own account (static paths first, before /{user_id}) ─────────────


@router.patch("/profile")
async def update_profile(
    body: UpdateProfileRequest,
    token_payload: dict[str, Any] = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_profile(
        uuid.UUID(token_payload["user_id"]),
        db,
        username=body.username,
        avatar=str(body.avatar) if body.avatar is not None else None,
        bio=body.bio,
    )
    return ok({"message": "Profile updated successfully", "user": serialize_user(user)})


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest = Depends(validate_password_change),
    token_payload: dict[str, Any] = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    """Requires the current password.  Existing sessions stay valid."""
    await user_service.change_password(
        uuid.UUID(token_payload["user_id"]), body.current_password, body.new_password, db,
    )
    return ok({"message": "Password changed successfully"})


@router.delete("/account")
async def delete_account(
    body: DeleteAccountRequest,
    response: Response,
    token_payload: dict[str, Any] = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: the row stays, the account is disabled and logged out."""
    await user_service.deactivate_account(uuid.UUID(token_payload["user_id"]), body.password, db)
    clear_auth_cookies(response)
    return ok({"message": "Account deleted successfully"})


@router.get("/settings")
async def get_settings(_: dict[str, Any] = Depends(get_current_user_token)):
    return ok({"settings": DEFAULT_SETTINGS})


@router.patch("/settings")
async def update_settings(
    body: UpdateSettingsRequest,
    _: dict[str, Any] = Depends(get_current_user_token),
):
    changes = body.model_dump(by_alias=True, exclude_unset=True)
    return ok({"message": "Settings updated successfully", "settings": {**DEFAULT_SETTINGS, **changes}})


@router.get("/achievements")
async def get_achievements(_: dict[str, Any] = Depends(get_current_user_token)):
    return ok({
        "achievements": [
            {
                "id": "first_race",
                "name": "First Race",
                "description": "Complete your first race",
                "earned": True,
                "earnedAt": _now(),
            },
            {
                "id": "speed_demon",
                "name": "Speed Demon",
                "description": "Type over 100 WPM",
                "earned": False,
                "progress": 85,
            },
        ],
    })


@router.get("/history")
async def get_history(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    _: dict[str, Any] = Depends(get_current_user_token),
):
    return ok({
        "history": [
            {
                "id": "test_123",
                "type": "solo",
                "wpm": 89,
                "accuracy": 95.5,
                "duration": 60,
                "completedAt": _now(),
            },
        ],
        "pagination": {"page": page, "limit": limit, "total": 245, "pages": 13},
    })


# ── Public profile ───────────────────────────────────────────────────


@router.get("/{user_id}")
async def get_user_profile(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user_by_id(user_id, db)
    if user is None or not user.is_active:
        raise AppError.not_found("User not found")
    profile = serialize_user(user)
    # Email is private to the owner.
    profile.pop("email", None)
    return ok({"user": profile})
