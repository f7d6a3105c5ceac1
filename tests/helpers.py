"""Test doubles and small HTTP helpers shared by the test suite."""

import re
import time

from httpx import AsyncClient, Response

STRONG_PASSWORD = "Sup3r$ecret"

_RESET_TOKEN_RE = re.compile(r"reset-password\?token=([0-9a-f]{64})")


class InMemoryTokenCache:
    """TTL key-value store with the same surface as ``RedisTokenCache``."""

    def __init__(self):
        self._data: dict[str, tuple[str, float]] = {}
        self._offset = 0.0
        self.closed = False
        self.healthy = True

    def _now(self) -> float:
        return time.monotonic() + self._offset

    def advance(self, seconds: float) -> None:
        """Move the cache clock forward; entries past their TTL vanish."""
        self._offset += seconds

    def _purge(self) -> None:
        now = self._now()
        for key in [k for k, (_, expires_at) in self._data.items() if expires_at <= now]:
            del self._data[key]

    async def get(self, key: str) -> str | None:
        self._purge()
        entry = self._data.get(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._data[key] = (value, self._now() + ttl_seconds)

    async def set_many(self, items: dict[str, str], ttl_seconds: int) -> None:
        expires_at = self._now() + ttl_seconds
        for key, value in items.items():
            self._data[key] = (value, expires_at)

    async def delete(self, *keys: str) -> int:
        self._purge()
        return sum(1 for key in keys if self._data.pop(key, None) is not None)

    async def ping(self) -> bool:
        return self.healthy

    async def aclose(self) -> None:
        self.closed = True

    def keys(self, prefix: str = "") -> list[str]:
        self._purge()
        return [key for key in self._data if key.startswith(prefix)]

    def ttl(self, key: str) -> float | None:
        entry = self._data.get(key)
        return entry[1] - self._now() if entry else None


class RecordingMailer:
    """Keeps every message instead of sending it."""

    def __init__(self, fail: bool = False):
        self.sent: list[dict[str, str]] = []
        self.fail = fail

    async def send(self, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise ConnectionError("SMTP server unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html_body})

    def to(self, address: str) -> list[dict[str, str]]:
        return [message for message in self.sent if message["to"] == address]


def parse_set_cookies(response: Response) -> dict[str, dict[str, str]]:
    """``{name: {"value": ..., "<attr>": ...}}`` from every Set-Cookie header.

    Attribute names are lower-cased; flag attributes map to ``""``.
    """
    cookies: dict[str, dict[str, str]] = {}
    for header in response.headers.get_list("set-cookie"):
        first, *attrs = [part.strip() for part in header.split(";")]
        name, _, value = first.partition("=")
        parsed = {"value": value.strip('"')}
        for attr in attrs:
            key, _, attr_value = attr.partition("=")
            parsed[key.lower()] = attr_value
        cookies[name] = parsed
    return cookies


def extract_cookies(response: Response) -> dict[str, str]:
    return {name: attrs["value"] for name, attrs in parse_set_cookies(response).items()}


def cookie_header(**cookies: str) -> dict[str, str]:
    return {"Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}


def auth_headers(cookies: dict[str, str]) -> dict[str, str]:
    return cookie_header(**cookies)


def extract_reset_token(html: str) -> str:
    match = _RESET_TOKEN_RE.search(html)
    assert match is not None, "no reset link in email"
    return match.group(1)


async def register_user(
    client: AsyncClient,
    username: str = "alice",
    password: str = STRONG_PASSWORD,
    email: str | None = None,
) -> Response:
    body = {"username": username, "password": password, "confirmPassword": password}
    if email is not None:
        body["email"] = email
    return await client.post("/api/auth/register", json=body)


async def login_user(
    client: AsyncClient,
    username: str = "alice",
    password: str = STRONG_PASSWORD,
) -> Response:
    return await client.post("/api/auth/login", json={"username": username, "password": password})
