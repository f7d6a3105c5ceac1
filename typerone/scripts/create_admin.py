"""
One-time bootstrap script — creates the first ADMIN user.

Usage:
    python -m typerone.scripts.create_admin

You only need this ONCE.  Regular users sign up through
POST /api/auth/register.
"""

import asyncio
import getpass

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from typerone.core.config import settings
from typerone.core.database import build_engine, build_session_factory
from typerone.core.errors import AppError
from typerone.core.validators import validate_password_complexity
from typerone.models.user import User, UserRole
from typerone.schemas import RegisterRequest
from typerone.services import user_service


async def create_admin_user(
    session: AsyncSession,
    *,
    username: str,
    email: str | None,
    password: str,
) -> User:
    """Validate and insert an active admin.  Raises ``AppError`` on bad input."""
    # Same username / email / password rules as self-registration.
    try:
        RegisterRequest(
            username=username, email=email or None, password=password, confirmPassword=password,
        )
    except ValidationError as exc:
        details: dict[str, list[str]] = {}
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "body"
            details.setdefault(field, []).append(err["msg"])
        raise AppError.validation("Validation failed", details)
    validate_password_complexity(password)

    conflicts = await user_service.find_conflicts(username, email, session)
    if conflicts:
        raise AppError.conflict("User already exists", conflicts)

    admin = await user_service.create_user(
        session,
        username=username,
        password=password,
        email=email or None,
        role=UserRole.ADMIN,
    )
    await session.commit()
    return admin


async def create_admin() -> None:
    engine = build_engine(settings.DATABASE_URL)
    session_factory = build_session_factory(engine)

    try:
        # ── Collect input ────────────────────────────────────────────
        print(f"\n🔧  {settings.APP_NAME} — First Admin Setup\n")
        username = input("  Username:    ").strip()
        email = input("  Email (opt): ").strip()
        password = getpass.getpass("  Password:    ")
        confirm = getpass.getpass("  Confirm:     ")

        if not username or not password:
            print("\n❌  Username and password are required.")
            return

        if password != confirm:
            print("\n❌  Passwords do not match.")
            return

        async with session_factory() as session:
            try:
                admin = await create_admin_user(
                    session, username=username, email=email or None, password=password,
                )
            except AppError as exc:
                print(f"\n❌  {exc.message}")
                for field, messages in (exc.details or {}).items():
                    for message in messages:
                        print(f"    {field}: {message}")
                return

        print("\n✅  Admin user created successfully!")
        print(f"    ID:       {admin.id}")
        print(f"    Username: {admin.username}")
        print(f"    Role:     {admin.role.value}")
        print("\n   You can now log in via POST /api/auth/login\n")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_admin())
