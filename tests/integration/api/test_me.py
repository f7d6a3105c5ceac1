import uuid
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from jose import jwt
from sqlalchemy import delete, update

from tests.helpers import auth_headers, cookie_header, extract_cookies, register_user
from typerone.core.config import settings
from typerone.models.user import User


@pytest.mark.asyncio
async def test_me_returns_sanitized_user(client: AsyncClient):
    cookies = extract_cookies(await register_user(client, "alice", email="alice@example.com"))

    response = await client.get("/api/auth/me", headers=auth_headers(cookies))

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert set(user) == {
        "id", "username", "email", "avatar", "bio", "role",
        "isActive", "lastLoginAt", "createdAt", "updatedAt",
    }


@pytest.mark.asyncio
async def test_me_without_cookie(client: AsyncClient):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Access token not found"


@pytest.mark.asyncio
async def test_me_with_expired_token(client: AsyncClient):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "user_id": str(uuid.uuid4()),
            "username": "alice",
            "role": "user",
            "session_id": "0" * 64,
            "type": "access",
            "iat": now - timedelta(minutes=30),
            "exp": now - timedelta(minutes=15),
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )

    response = await client.get("/api/auth/me", headers=cookie_header(accessToken=token))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired access token"


@pytest.mark.asyncio
async def test_me_after_user_removed(client: AsyncClient, db_session):
    cookies = extract_cookies(await register_user(client, "alice"))
    await db_session.execute(delete(User).where(User.username == "alice"))
    await db_session.commit()

    response = await client.get("/api/auth/me", headers=auth_headers(cookies))

    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_me_after_account_disabled(client: AsyncClient, db_session):
    cookies = extract_cookies(await register_user(client, "alice"))
    await db_session.execute(update(User).where(User.username == "alice").values(is_active=False))
    await db_session.commit()

    response = await client.get("/api/auth/me", headers=auth_headers(cookies))

    assert response.status_code == 401
    assert response.json()["message"] == "Account is inactive"
