# (c) Copyright Datacraft, 2026
"""
Shared test fixtures: an in-memory SQLite database per test, users, and an
authenticated API client.
"""
import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from uuid_extensions import uuid7str

from drivewatch.app import app
from drivewatch.core.auth import get_current_user
from drivewatch.core.db.base import Base
from drivewatch.core.db.engine import get_session
from drivewatch.core.db import models  # noqa: F401 registers all tables
from drivewatch.core.features.users.db.orm import User, UserRole
from drivewatch.core.tests.types import AuthTestClient


@pytest.fixture
async def db_engine():
	engine = create_async_engine(
		"sqlite+aiosqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
	)
	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)
	yield engine
	await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncSession:
	factory = async_sessionmaker(db_engine, expire_on_commit=False)
	async with factory() as session:
		yield session


@pytest.fixture
async def make_user(db_session: AsyncSession):
	"""Factory fixture for creating users."""
	async def _make_user(
		username: str | None = None,
		role: UserRole = UserRole.OPERATOR,
		**kwargs,
	) -> User:
		username = username or f"user-{uuid7str()[-8:]}"
		user = User(
			id=uuid7str(),
			username=username,
			name=kwargs.get("name", username.title()),
			email=kwargs.get("email", f"{username}@example.com"),
			role=role.value,
			is_active=kwargs.get("is_active", True),
		)
		db_session.add(user)
		await db_session.commit()
		return user

	return _make_user


@pytest.fixture
async def user(make_user) -> User:
	return await make_user(username="operator", role=UserRole.OPERATOR)


@pytest.fixture
async def editor(make_user) -> User:
	return await make_user(username="editor", role=UserRole.EDITOR)


@pytest.fixture
async def admin(make_user) -> User:
	return await make_user(username="admin", role=UserRole.ADMIN)


@pytest.fixture
async def make_api_client(db_session: AsyncSession):
	"""Build an API client authenticated as the given user. One user per test."""
	clients = []

	async def _override_session():
		yield db_session

	def _make_api_client(as_user: User) -> AuthTestClient:
		user_id = as_user.id

		async def _override_current_user() -> User:
			# re-read: a failed request rolls back and expires loaded objects
			return await db_session.get(User, user_id)

		app.dependency_overrides[get_session] = _override_session
		app.dependency_overrides[get_current_user] = _override_current_user
		client = httpx.AsyncClient(
			transport=httpx.ASGITransport(app=app),
			base_url="http://test",
		)
		clients.append(client)
		return AuthTestClient(client, as_user)

	yield _make_api_client

	for client in clients:
		await client.aclose()
	app.dependency_overrides.clear()


@pytest.fixture
async def auth_api_client(make_api_client, user) -> AuthTestClient:
	return make_api_client(user)
