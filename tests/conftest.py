# tests/conftest.py

import os
import tempfile
from typing import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

# The application reads its settings at import time.
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), f"inventory_api_test_{os.getpid()}.db")
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("APP_ENV", "testing")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.main import app as main_app
from app.core.database import get_session
from app.core.security import get_password_hash
from app.domains.usr import models as usr_models
from app.domains.inv import models as inv_models

ADMIN_PASSWORD = "adminpass123"
STAFF_PASSWORD = "staffpass123"


# --- test database ---
# A file database with NullPool: every session gets its own connection, so the
# request sessions and the fixture session never share a transaction.
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    future=True,
    poolclass=NullPool,
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def pytest_sessionfinish(session, exitstatus):
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest_asyncio.fixture(scope="function", autouse=True)
async def setup_database():
    """
    Recreates every table before each test. The CRUD layer commits, so a
    rollback-per-test scheme would not isolate tests.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and checking what the API wrote."""
    async with TestingSessionLocal() as session:
        yield session


async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(autouse=True)
def override_dependencies():
    original_overrides = main_app.dependency_overrides.copy()
    main_app.dependency_overrides[get_session] = override_get_session
    yield
    main_app.dependency_overrides.clear()
    main_app.dependency_overrides.update(original_overrides)


# --- users ---
@pytest_asyncio.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    Returns a coroutine that stores an account directly in the database.
    """
    async def _create_user(
        email: str,
        password: str,
        role: usr_models.UserRole = usr_models.UserRole.STAFF,
        is_active: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user = usr_models.User(
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            is_active=is_active,
            **kwargs,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_admin_user(user_factory: Callable) -> usr_models.User:
    return await user_factory("admin@example.com", ADMIN_PASSWORD, role=usr_models.UserRole.ADMIN)


@pytest_asyncio.fixture(scope="function")
async def test_staff_user(user_factory: Callable) -> usr_models.User:
    return await user_factory("staff@example.com", STAFF_PASSWORD, role=usr_models.UserRole.STAFF)


# --- clients ---
@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client."""
    transport = ASGITransport(app=main_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture(scope="function")
def authorized_client_factory():
    """
    Returns an async context manager yielding a client signed in as the given
    user through the real token endpoint.
    """
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User, password: str) -> AsyncGenerator[AsyncClient, None]:
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            login_data = {"username": user.email, "password": password}
            res = await ac.post("/api/v1/usr/auth/token", data=login_data)
            if res.status_code != 200:
                pytest.fail(f"Login failed for {user.email}: {res.text}")
            token = res.json()["access_token"]
            ac.headers["Authorization"] = f"Bearer {token}"
            yield ac

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def admin_client(authorized_client_factory, test_admin_user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_admin_user, ADMIN_PASSWORD) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def staff_client(authorized_client_factory, test_staff_user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_staff_user, STAFF_PASSWORD) as ac:
        yield ac


# --- inventory ---
@pytest_asyncio.fixture(scope="function")
async def test_container(db_session: AsyncSession) -> inv_models.Container:
    container = inv_models.Container(supplier="Acme Traders", container_code="CONT-TEST-0001", location="Dock 4")
    db_session.add(container)
    await db_session.commit()
    await db_session.refresh(container)
    return container


@pytest.fixture(scope="function")
def product_factory(db_session: AsyncSession) -> Callable[..., Awaitable[inv_models.Product]]:
    async def _create_product(container: inv_models.Container, sku: str, **kwargs) -> inv_models.Product:
        product_data = {
            "sku": sku,
            "name": f"{sku}-name",
            "nomenclature": sku,
            "quantity": 20,
            "actual_price": 80,
            "negotiable_price": 120,
            "selling_price": 100,
            "container_quantity": 20,
            **kwargs,
        }
        product = inv_models.Product(container_id=container.id, **product_data)
        db_session.add(product)
        await db_session.commit()
        await db_session.refresh(product)
        return product
    return _create_product
