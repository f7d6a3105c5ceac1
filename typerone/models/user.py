"""
User model.

Design decisions:
- `password_hash` and `session_token` are *deferred*: a plain
  ``select(User)`` never loads them.  Call sites that need them ask for
  them explicitly with ``undefer(...)`` (see ``user_service``).
- `session_token` is the single source of truth for token validity.
  It is NULL until the first login/registration, replaced on every
  login and cleared on logout.
- Accounts are soft-disabled through `is_active`; there is no hard
  delete.
- Nothing here hashes passwords or strips fields.  Hashing happens in
  the services that mutate passwords; serialization happens in
  ``typerone.schemas.serialize_user``.
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from typerone.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(256), unique=True, index=True, nullable=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False, deferred=True)
    session_token: Mapped[str | None] = mapped_column(String(128), nullable=True, deferred=True)
    avatar: Mapped[str | None] = mapped_column(String(512), nullable=True)
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.USER,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_users_is_active", "is_active"),
        Index("ix_users_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"
