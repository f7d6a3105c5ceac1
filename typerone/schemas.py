"""
Pydantic schemas for request / response serialization.

Kept in a single file for now — split per-domain when it grows.
Schemas are deliberately decoupled from SQLAlchemy models so the
API surface can evolve independently of the DB layer.

Request bodies forbid unknown fields.  Response payloads use camelCase
keys, matching the frontend.
"""

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl
from pydantic.alias_generators import to_camel

from typerone.models.user import User

USERNAME_PATTERN = r"^[a-zA-Z0-9_-]+$"

Difficulty = Literal["easy", "medium", "hard"]


class RequestBody(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# ── Auth ─────────────────────────────────────────────────────────────
class RegisterRequest(RequestBody):
    username: str = Field(min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    email: EmailStr | None = None
    password: str = Field(min_length=8)
    confirm_password: str = Field(min_length=1, alias="confirmPassword")


class LoginRequest(RequestBody):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ForgotPasswordRequest(RequestBody):
    identifier: str = Field(min_length=1, description="Username or email address")


class ResetPasswordRequest(RequestBody):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8)
    confirm_password: str = Field(min_length=1, alias="confirmPassword")


# ── Users ────────────────────────────────────────────────────────────
class UpdateProfileRequest(RequestBody):
    username: str | None = Field(default=None, min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    avatar: HttpUrl | None = None
    bio: str | None = Field(default=None, max_length=500)


class ChangePasswordRequest(RequestBody):
    current_password: str = Field(min_length=1, alias="currentPassword")
    new_password: str = Field(min_length=8, alias="newPassword")
    confirm_password: str = Field(min_length=1, alias="confirmPassword")


class DeleteAccountRequest(RequestBody):
    password: str = Field(min_length=1)
    confirmation: Literal["DELETE"]


class UpdateSettingsRequest(RequestBody):
    theme: Literal["light", "dark", "system"] | None = None
    sound_enabled: bool | None = Field(default=None, alias="soundEnabled")
    difficulty: Difficulty | None = None
    language: str | None = Field(default=None, min_length=2, max_length=5)
    show_keyboard: bool | None = Field(default=None, alias="showKeyboard")
    blind_mode: bool | None = Field(default=None, alias="blindMode")
    quick_tab: bool | None = Field(default=None, alias="quickTab")


# ── Typing tests ─────────────────────────────────────────────────────
class SubmitTestRequest(RequestBody):
    test_id: str = Field(min_length=1, alias="testId")
    text: str = Field(min_length=1)
    user_input: str = Field(min_length=1, alias="userInput")
    duration: int = Field(gt=0)
    mode: Literal["time", "words", "custom"]


class SubmitDailyChallengeRequest(RequestBody):
    challenge_id: str = Field(min_length=1, alias="challengeId")
    user_input: str = Field(min_length=1, alias="userInput")
    duration: int = Field(gt=0)


class AnalyzeTextRequest(RequestBody):
    text: str = Field(min_length=10, max_length=5000)


# ── Races ────────────────────────────────────────────────────────────
class CreateRaceRequest(RequestBody):
    mode: Literal["public", "private", "friends"] = "public"
    max_players: int = Field(default=5, ge=2, le=10, alias="maxPlayers")
    difficulty: Difficulty = "medium"
    duration: int = Field(default=60, gt=0)
    password: str | None = None


class ReadyStatusRequest(RequestBody):
    ready: bool = True


class FinishRaceRequest(RequestBody):
    user_input: str = Field(min_length=1, alias="userInput")
    time_completed: float = Field(gt=0, alias="timeCompleted")


class QuickMatchRequest(RequestBody):
    difficulty: Difficulty = "medium"
    skill_level: int | None = Field(default=None, ge=1, le=100, alias="skillLevel")


# ── User view ────────────────────────────────────────────────────────
class UserOut(BaseModel):
    """Public view of a user.  Never carries password or session data."""

    id: uuid.UUID
    username: str
    email: str | None = None
    avatar: str | None = None
    bio: str = ""
    role: str
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


def serialize_user(user: User) -> dict[str, Any]:
    """The only path from a ``User`` row to a response body."""
    return UserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        avatar=user.avatar,
        bio=user.bio or "",
        role=user.role.value,
        is_active=user.is_active,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
        updated_at=user.updated_at,
    ).model_dump(mode="json", by_alias=True)
