from datetime import date
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from classroll.core.config import Settings
from classroll.core.database import Database
from classroll.core.security import ADMIN, PROF, create_access_token
from classroll.main import create_app
from classroll.models import ClassModel, Student, User, class_users
from classroll.services.session_service import SessionService

SCHOOL_YEAR = 2024


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret_key="test-secret",
        log_level="warning",
    )


@pytest_asyncio.fixture
async def database():
    database = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def db(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db):
    """Two classes: A owned by ``owner`` and co-managed by ``helper``, B owned by ``outsider``."""
    db.add_all([
        User(id=1, username="admin", role=ADMIN),
        User(id=2, username="owner", role=PROF),
        User(id=3, username="helper", role=PROF),
        User(id=4, username="outsider", role=PROF),
    ])
    db.add_all([
        ClassModel(id=10, name="Guitar", owner_id=2, weekday=3),
        ClassModel(id=20, name="Piano", owner_id=4),
    ])
    await db.flush()
    await db.execute(class_users.insert().values(class_id=10, user_id=3))
    db.add_all([
        Student(id=100, first_name="Ana", last_name="Bell", class_id=10),
        Student(id=101, first_name="Ben", last_name="Cruz", class_id=10),
        Student(id=200, first_name="Cleo", last_name="Diaz", class_id=20),
    ])
    await db.commit()
    return SimpleNamespace(
        admin_id=1, owner_id=2, helper_id=3, outsider_id=4,
        class_a=10, class_b=20,
        student_a1=100, student_a2=101, student_b=200,
    )


@pytest_asyncio.fixture
async def session_a(db, seed):
    """A single Wednesday session of class A."""
    sessions = await SessionService(db).ensure_sessions(seed.class_a, [date(SCHOOL_YEAR, 9, 4)])
    return sessions[0]


@pytest.fixture
def token_for(settings):
    def make(user_id: int, role: str) -> dict:
        token = create_access_token({"id": user_id, "role": role}, settings)
        return {"Authorization": f"Bearer {token}"}
    return make


@pytest_asyncio.fixture
async def client(settings, database, seed):
    app = create_app(settings=settings, database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
