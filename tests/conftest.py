"""
Shared fixtures.

The environment is configured before anything from app is imported so the
cached settings point at a throwaway database and storage folder.
"""
import os
import tempfile

_STORAGE = tempfile.mkdtemp(prefix="videoapi-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_STORAGE}/videoapi.db"
os.environ["STORAGE_PATH"] = _STORAGE
os.environ["TMP_PATH"] = os.path.join(_STORAGE, "tmp")
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["SUPER_PASSWORD"] = "super-secret"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "admin123"
os.environ["ALERTMANAGER_API_KEY"] = "hook-key"
os.environ["FFMPEG_PATH"] = ""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

import app.models  # noqa: F401
from app.database import Base
from app.main import app as fastapi_app


@pytest.fixture(scope="session")
def client():
    with TestClient(fastapi_app) as c:
        yield c


def login(client, user_id: str, password: str) -> dict:
    """Log in and return Authorization headers; the session cookie is dropped."""
    response = client.post("/api/login", json={"id": user_id, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture(scope="session")
def admin_headers(client):
    return login(client, "admin", "admin123")


@pytest.fixture(scope="session")
def storage_path():
    return _STORAGE


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """A fresh database with every table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()
