"""Shared fixtures: a throwaway SQLite database per test, two users and an API client."""
import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["OPENROUTER_API_KEY"] = ""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import app.models  # noqa: F401  registers every table on Base.metadata
from app.api.deps import get_advisor, get_currency_converter, get_current_user
from app.core.auth import User
from app.core.database import Base, get_async_session
from app.crud.transaction import create_transaction_for_user
from app.main import app as fastapi_app
from app.models.transaction import Transaction, TransactionType
from app.schemas.transaction import TransactionCreate
from app.services.advisor import FallbackAdvisor
from app.services.currency import DEFAULT_RATES, CurrencyConverter, RateCache


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def db_engine(tmp_path):
    """File-backed SQLite so every session in a test sees the same data."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def _make_user(db: AsyncSession, email: str) -> User:
    user = User(
        email=email,
        hashed_password="not-a-real-hash",
        is_active=True,
        is_superuser=False,
        is_verified=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def user(db) -> User:
    return await _make_user(db, "alice@example.com")


@pytest.fixture
async def other_user(db) -> User:
    return await _make_user(db, "bob@example.com")


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def add_transaction(db, user):
    """Persist a transaction through the CRUD layer; defaults to an expense of the main user."""

    async def _add(
        amount="10.00",
        transaction_date: datetime = datetime(2024, 3, 10, 12, 0),
        type: TransactionType = TransactionType.expense,
        category: str = "food",
        description: str = "Lunch",
        location: Optional[str] = None,
        tags: Optional[List[str]] = None,
        owner: Optional[User] = None,
    ) -> Transaction:
        tx_in = TransactionCreate(
            amount=Decimal(str(amount)),
            type=type,
            category=category,
            description=description,
            transaction_date=transaction_date,
            location=location,
            tags=tags,
        )
        return await create_transaction_for_user((owner or user).id, tx_in, db)

    return _add


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def override_session(session_factory):
    async def _get_test_session():
        async with session_factory() as session:
            yield session

    return _get_test_session


@pytest.fixture
def currency_converter():
    # No rate source: conversions use the seeded table
    return CurrencyConverter(RateCache(DEFAULT_RATES))


@pytest.fixture
async def anon_client(override_session, currency_converter):
    """Client that goes through the real bearer-token dependency"""
    fastapi_app.dependency_overrides[get_async_session] = override_session
    fastapi_app.dependency_overrides[get_advisor] = FallbackAdvisor
    fastapi_app.dependency_overrides[get_currency_converter] = lambda: currency_converter
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(anon_client, user):
    """Client authenticated as `user`; the user is loaded in the request's own session"""
    user_id = user.id

    async def _current_user(db: AsyncSession = Depends(get_async_session)) -> User:
        return await db.get(User, user_id)

    fastapi_app.dependency_overrides[get_current_user] = _current_user
    return anon_client
