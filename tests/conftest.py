import os
import tempfile
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING CONFIG
# Must happen BEFORE importing app.main so settings and the engine
# pick up the throwaway SQLite file.
# ------------------------------------------------------------------
_DB_DIR = tempfile.mkdtemp(prefix="school-safety-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["ENV"] = "test"
os.environ["DEMO_IDENTITY_FALLBACK"] = "false"

from app.main import app
from app.core.database import AsyncSessionLocal, drop_db, init_db
from app.core.security import create_access_token
from app.models.user import UserRole
from app.services.auth_service import create_user
from app.services.document_store import DocumentStore


@pytest_asyncio.fixture
async def store():
    """Fresh tables for every test; the app's own store instance."""
    await drop_db()
    await init_db()
    yield app.state.store
    await app.state.store.flush()


@pytest_asyncio.fixture
async def private_store(store):
    """A store nobody else subscribes to."""
    return DocumentStore(AsyncSessionLocal)


@pytest_asyncio.fixture
async def client(store):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


def auth_headers(user: dict) -> dict:
    token = create_access_token(subject=user["id"], data={"email": user["email"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(store):
    counter = {"n": 0}

    async def _make(role: UserRole = UserRole.Student, active: bool = True, email: str | None = None):
        counter["n"] += 1
        user = await create_user(
            store,
            name=f"{role.name} {counter['n']}",
            email=email or f"{role.name.lower()}{counter['n']}@escola.com",
            password="password123",
            role=role,
        )
        if not active:
            user = await store.update_document("users", user["id"], {"isActive": False})
        return user, auth_headers(user)

    return _make
