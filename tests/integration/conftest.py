from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.depends import get_unit_of_work
from src.domain.entities import Business, StaffMembership, StaffPermissions, User, UserRole
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.tokens import generate_jwt


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fetch(session_factory):
    """Run a select in a fresh session so results reflect committed state"""

    async def _fetch(stmt):
        async with session_factory() as session:
            result = await session.exec(stmt)
            return result.all()

    return _fetch


@pytest_asyncio.fixture
async def seed(db_session, test_data):
    """Owner, business, a staff manager, a plain stylist and a not-yet-staff invitee"""
    users = {
        key: User(name=data["name"], email=data["email"], role=UserRole(data["role"]))
        for key, data in test_data.get_copy("users").items()
    }
    db_session.add_all(users.values())
    await db_session.flush()

    business = Business(owner_id=users["owner"].id, **test_data.get_copy("business"))
    db_session.add(business)
    await db_session.flush()

    for key, permissions in test_data.get_copy("memberships").items():
        db_session.add(
            StaffMembership(
                user_id=users[key].id,
                business_id=business.id,
                permissions=StaffPermissions.model_validate(permissions).to_storage(),
            )
        )

    await db_session.commit()
    return SimpleNamespace(business=business, **users)


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {generate_jwt(user.id, user.email)}"}

    return _headers


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
