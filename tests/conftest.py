import os

# Settings are read at import time, so the environment must be in place
# before anything from typerone is imported.
os.environ["MODE"] = "testing"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./typerone-test.db"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SENDER_EMAIL"] = ""
os.environ["FRONTEND_URL"] = "http://localhost:3000"

from http.cookiejar import CookieJar, DefaultCookiePolicy

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tests.helpers import InMemoryTokenCache, RecordingMailer
from typerone.core.database import build_engine, build_session_factory
from typerone.core.resources import AppResources
from typerone.models import Base


@pytest.fixture
def token_cache():
    return InMemoryTokenCache()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def resources(engine, token_cache, mailer):
    return AppResources(engine=engine, token_cache=token_cache, mailer=mailer)


@pytest.fixture
def app(resources):
    from typerone.main import create_app

    return create_app(resources=resources)


@pytest_asyncio.fixture
async def client(app):
    # Cookies are sent explicitly per request; the client never stores them.
    no_cookies = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", cookies=no_cookies) as ac:
        yield ac
