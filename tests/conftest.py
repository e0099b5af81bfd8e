"""
tests/conftest.py -- Shared fixtures for blogauth tests.

This module provides:
  - db_engine: an aiosqlite engine on a per-test database file, tables created
  - run_db: runs an async callable against a fresh session and commits
  - identity_provider: in-memory stand-in for Firebase token verification
  - client: TestClient wired to the per-test database and fake provider

NullPool is used so no connection outlives the event loop that opened it.
TestClient runs the app on its own loop in a portal thread, while run_db
uses asyncio.run() on the test thread; pooled aiosqlite connections would
otherwise be shared across loops.

Env vars must be set before any blogauth import: Settings() is instantiated
at module load and requires DATABASE_URL and SECRET_KEY.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from contextlib import asynccontextmanager
from typing import Any

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production-use")
os.environ.setdefault("ENV", "test")
# Minimum bcrypt cost keeps the suite fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from blogauth.api.deps import get_identity_provider, get_session
from blogauth.core.errors import TokenInvalid
from blogauth.main import app
from blogauth.models.user import User
from blogauth.services.google_auth_service import GoogleClaims


class FakeIdentityProvider:
    """Accepts only the tokens registered with add()."""

    def __init__(self) -> None:
        self.claims_by_token: dict[str, GoogleClaims] = {}

    def add(self, token: str, email: str, name: str | None = None, picture: str | None = None) -> None:
        self.claims_by_token[token] = GoogleClaims(email=email, name=name, picture=picture)

    async def verify(self, id_token: str) -> GoogleClaims:
        claims = self.claims_by_token.get(id_token)
        if claims is None:
            raise TokenInvalid()
        return claims


async def _create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


@asynccontextmanager
async def _test_lifespan(app):
    # Tables are created by the db_engine fixture
    yield


@pytest.fixture
def db_engine(tmp_path) -> Generator[AsyncEngine, None, None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'blogauth.db'}", poolclass=NullPool)
    asyncio.run(_create_tables(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def run_db(session_factory) -> Callable[[Callable[[AsyncSession], Awaitable[Any]]], Any]:
    """Return a helper that runs fn(session) to completion and commits."""

    def _run(fn: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async def _inner() -> Any:
            async with session_factory() as session:
                result = await fn(session)
                await session.commit()
                return result

        return asyncio.run(_inner())

    return _run


@pytest.fixture
def add_user(run_db) -> Callable[..., User]:
    """Insert a user row directly, bypassing the signup flow."""

    def _add(**fields: Any) -> User:
        fields.setdefault("fullname", "Existing User")
        fields.setdefault("email", f"{fields.get('username', 'existing')}@example.com")
        fields.setdefault("username", fields["email"].split("@")[0])

        async def _insert(session: AsyncSession) -> User:
            user = User(**fields)
            session.add(user)
            await session.flush()
            await session.refresh(user)
            return user

        return run_db(_insert)

    return _add


@pytest.fixture
def count_users(run_db) -> Callable[[], int]:
    async def _count(session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(User))
        return result.scalar_one()

    return lambda: run_db(_count)


@pytest.fixture
def get_user(run_db) -> Callable[[str], User | None]:
    def _get(email: str) -> User | None:
        async def _lookup(session: AsyncSession) -> User | None:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

        return run_db(_lookup)

    return _get


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def client(session_factory, identity_provider) -> Generator[TestClient, None, None]:
    """TestClient against the real app with storage and Firebase swapped out."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.router.lifespan_context = _test_lifespan

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
