"""
CodigoHub Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (asserts on what was or wasn't issued)
    ├── db_session:      Real AsyncSession on in-memory SQLite with the ORM schema
    ├── owner / other / admin: Actors (user 1, user 2, admin 99)
    ├── make_codigo / make_collection / make_category: row factories
    ├── auth_headers:    Builds a Bearer header for an Actor
    └── test_client:     HTTPX AsyncClient bound to db_session
"""

import os

# Settings are read at import time, so these go before any codigohub import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real-0123456789abcdef"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import codigohub.models  # noqa: F401
from codigohub.database import Base, get_db_session
from codigohub.models.category import Category
from codigohub.models.codigo import Codigo
from codigohub.models.collection import Collection
from codigohub.security import Actor, Role, create_access_token


# ══════════════════════════════════════════════════════════════════════════
# Sessions
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_session():
    """
    A real session on a private in-memory SQLite database.

    StaticPool keeps the single connection alive so every statement sees
    the tables created from Base.metadata.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


# ══════════════════════════════════════════════════════════════════════════
# Actors
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def owner() -> Actor:
    return Actor(id=1, role=Role.USUARIO)


@pytest.fixture
def other() -> Actor:
    return Actor(id=2, role=Role.USUARIO)


@pytest.fixture
def admin() -> Actor:
    return Actor(id=99, role=Role.ADMIN)


# ══════════════════════════════════════════════════════════════════════════
# Row Factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_codigo(db_session):
    async def _make(usuario_id: int = 1, **fields) -> Codigo:
        values = {
            "titulo": "Hello",
            "codigo": "print('hi')",
            "lenguaje": "python",
            "descripcion": None,
            "tags": None,
            "tipo": None,
        }
        values.update(fields)
        codigo = Codigo(usuario_id=usuario_id, **values)
        db_session.add(codigo)
        await db_session.flush()
        return codigo

    return _make


@pytest.fixture
def make_collection(db_session):
    async def _make(usuario_id: int = 1, visibilidad: str = "privada", **fields) -> Collection:
        values = {"nombre": "Favoritos", "descripcion": None}
        values.update(fields)
        coleccion = Collection(usuario_id=usuario_id, visibilidad=visibilidad, **values)
        db_session.add(coleccion)
        await db_session.flush()
        return coleccion

    return _make


@pytest.fixture
def make_category(db_session):
    async def _make(nombre: str = "Algoritmos", estado: str = "activo") -> Category:
        category = Category(nombre=nombre, descripcion=f"{nombre} snippets", estado=estado)
        db_session.add(category)
        await db_session.flush()
        return category

    return _make


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def auth_headers():
    def _headers(actor: Actor) -> dict:
        return {"Authorization": f"Bearer {create_access_token(actor.id, actor.role)}"}

    return _headers


@pytest_asyncio.fixture
async def test_client(db_session):
    """
    HTTPX AsyncClient over ASGITransport.

    get_db_session is overridden so requests and the test share db_session;
    authentication goes through the real bearer-token dependency.
    """
    from codigohub.main import app

    async def _override_session():
        yield db_session

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
