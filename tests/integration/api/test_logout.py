import pytest
from httpx import AsyncClient

from tests.helpers import auth_headers, cookie_header, extract_cookies, parse_set_cookies, register_user


@pytest.mark.asyncio
async def test_logout_clears_cookies_and_revokes_session(client: AsyncClient):
    cookies = extract_cookies(await register_user(client, "alice"))

    response = await client.post("/api/auth/logout", headers=auth_headers(cookies))

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"message": "Logged out successfully"}}
    cleared = parse_set_cookies(response)
    for name in ("accessToken", "refreshToken"):
        assert cleared[name]["value"] == ""
        assert cleared[name]["max-age"] == "0"
        assert cleared[name]["path"] == "/"

    # The very token used to log out is now dead, as is the refresh token.
    me = await client.get("/api/auth/me", headers=auth_headers(cookies))
    assert me.status_code == 401
    refresh = await client.post(
        "/api/auth/refresh", headers=cookie_header(refreshToken=cookies["refreshToken"]),
    )
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_second_logout_with_same_token_fails(client: AsyncClient):
    cookies = extract_cookies(await register_user(client, "alice"))
    await client.post("/api/auth/logout", headers=auth_headers(cookies))

    response = await client.post("/api/auth/logout", headers=auth_headers(cookies))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_requires_access_token(client: AsyncClient):
    response = await client.post("/api/auth/logout")

    assert response.status_code == 401
    assert response.json()["message"] == "Access token not found"


@pytest.mark.asyncio
async def test_logout_with_garbage_token(client: AsyncClient):
    response = await client.post("/api/auth/logout", headers=cookie_header(accessToken="garbage"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired access token"
