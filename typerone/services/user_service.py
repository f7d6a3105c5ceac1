"""
User service — Credential Store queries & account mutations.

Reads that need the hidden columns (password hash, session token) say
so through the ``with_password`` / ``with_session`` flags; everything
else gets the plain row.  Password hashing happens here, at the call
sites that set a password, and nowhere else.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from typerone.core.errors import AppError
from typerone.core.security import hash_password, verify_password
from typerone.models.user import User, UserRole

logger = logging.getLogger(__name__)


def _select_user(*, with_password: bool = False, with_session: bool = False):
    stmt = select(User)
    if with_password:
        stmt = stmt.options(undefer(User.password_hash))
    if with_session:
        stmt = stmt.options(undefer(User.session_token))
    return stmt


def duplicate_field(exc: IntegrityError) -> str:
    """Best-effort name of the unique column behind an IntegrityError."""
    text = str(exc.orig).lower()
    for field in ("username", "email"):
        if field in text:
            return field
    return "field"


async def get_user_by_id(
    user_id: uuid.UUID,
    db: AsyncSession,
    *,
    with_password: bool = False,
    with_session: bool = False,
) -> User | None:
    stmt = _select_user(with_password=with_password, with_session=with_session).where(
        User.id == user_id
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_username(
    username: str,
    db: AsyncSession,
    *,
    with_password: bool = False,
    with_session: bool = False,
) -> User | None:
    stmt = _select_user(with_password=with_password, with_session=with_session).where(
        User.username == username
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_email(email: str, db: AsyncSession) -> User | None:
    stmt = select(User).where(User.email == email.lower())
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def find_conflicts(username: str, email: str | None, db: AsyncSession) -> dict[str, list[str]]:
    """Return a field → messages map for every identifier already taken."""
    conditions = [User.username == username]
    if email:
        conditions.append(User.email == email.lower())
    stmt = select(User.username, User.email).where(or_(*conditions))
    conflicts: dict[str, list[str]] = {}
    for row in (await db.execute(stmt)).all():
        if row.username == username:
            conflicts["username"] = ["Username already exists"]
        if email and row.email == email.lower():
            conflicts["email"] = ["Email already exists"]
    return conflicts


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    email: str | None = None,
    session_token: str | None = None,
    role: UserRole = UserRole.USER,
) -> User:
    """Insert a user, hashing the password first.

    Unique-constraint violations surface as ``IntegrityError`` from the
    flush; callers translate them.
    """
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=email.lower() if email else None,
        password_hash=hash_password(password),
        session_token=session_token,
        role=role,
    )
    db.add(user)
    await db.flush()
    return user


def set_password(user: User, new_password: str) -> None:
    user.password_hash = hash_password(new_password)


async def update_profile(
    user_id: uuid.UUID,
    db: AsyncSession,
    *,
    username: str | None = None,
    avatar: str | None = None,
    bio: str | None = None,
) -> User:
    user = await get_user_by_id(user_id, db)
    if user is None:
        raise AppError.not_found("User not found")

    if username is not None and username != user.username:
        user.username = username
    if avatar is not None:
        user.avatar = avatar
    if bio is not None:
        user.bio = bio

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise AppError.conflict("Username already exists", {"username": ["Username already exists"]})

    await db.commit()
    return user


async def change_password(
    user_id: uuid.UUID,
    current_password: str,
    new_password: str,
    db: AsyncSession,
) -> User:
    """Verify the current password, then store the new one.

    Existing sessions stay valid.
    """
    user = await get_user_by_id(user_id, db, with_password=True)
    if user is None:
        raise AppError.not_found("User not found")
    if not verify_password(current_password, user.password_hash):
        raise AppError.unauthorized("Invalid credentials")

    set_password(user, new_password)
    await db.commit()
    logger.info("Password changed for user %s", user.id)
    return user


async def deactivate_account(user_id: uuid.UUID, password: str, db: AsyncSession) -> User:
    """Soft-delete: mark inactive and drop the session."""
    user = await get_user_by_id(user_id, db, with_password=True, with_session=True)
    if user is None:
        raise AppError.not_found("User not found")
    if not verify_password(password, user.password_hash):
        raise AppError.unauthorized("Invalid credentials")

    user.is_active = False
    user.session_token = None
    await db.commit()
    logger.info("Account %s deactivated", user.id)
    return user


def touch_last_login(user: User) -> None:
    user.last_login_at = datetime.now(timezone.utc)
