import pytest
from sqlalchemy import select
from sqlalchemy.orm import undefer

from typerone.core.errors import AppError, ErrorKind
from typerone.core.security import verify_password
from typerone.models.user import User, UserRole
from typerone.scripts.create_admin import create_admin_user


@pytest.mark.asyncio
async def test_creates_active_admin(db_session):
    admin = await create_admin_user(
        db_session, username="root_admin", email="Admin@Example.com", password="Adm1n$ecret",
    )

    stored = (
        await db_session.execute(
            select(User).options(undefer(User.password_hash)).where(User.id == admin.id)
        )
    ).scalar_one()
    assert stored.role is UserRole.ADMIN
    assert stored.is_active
    assert stored.email == "admin@example.com"
    assert stored.password_hash != "Adm1n$ecret"
    assert verify_password("Adm1n$ecret", stored.password_hash)


@pytest.mark.asyncio
async def test_email_is_optional(db_session):
    admin = await create_admin_user(db_session, username="root_admin", email=None, password="Adm1n$ecret")

    assert admin.email is None


@pytest.mark.asyncio
async def test_refuses_duplicates(db_session):
    await create_admin_user(db_session, username="root_admin", email="admin@example.com", password="Adm1n$ecret")

    with pytest.raises(AppError) as exc_info:
        await create_admin_user(
            db_session, username="root_admin", email="admin@example.com", password="Adm1n$ecret",
        )

    assert exc_info.value.kind is ErrorKind.CONFLICT
    assert set(exc_info.value.details) == {"username", "email"}


@pytest.mark.asyncio
async def test_enforces_password_rules(db_session):
    with pytest.raises(AppError) as exc_info:
        await create_admin_user(db_session, username="root_admin", email=None, password="adminsecret")

    assert exc_info.value.kind is ErrorKind.VALIDATION
    assert exc_info.value.details["password"]


@pytest.mark.asyncio
async def test_enforces_username_rules(db_session):
    with pytest.raises(AppError) as exc_info:
        await create_admin_user(db_session, username="no spaces!", email=None, password="Adm1n$ecret")

    assert "username" in exc_info.value.details


@pytest.mark.asyncio
async def test_rejects_password_over_72_bytes(db_session):
    with pytest.raises(AppError) as exc_info:
        await create_admin_user(db_session, username="root_admin", email=None, password="Aa1$" + "x" * 80)

    assert exc_info.value.kind is ErrorKind.VALIDATION
    assert exc_info.value.details == {"password": ["Password must be at most 72 bytes"]}
