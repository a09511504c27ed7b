"""Pytest configuration and shared fixtures for testing."""

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from machina.configuration.config import Settings, get_settings
from machina.domain.model.machine.target import TargetDescriptor
from machina.infrastructure.adapters.secondary.persistence.models import Base

# --- Database Fixtures ---


@pytest.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session
        await session.rollback()


# --- Settings Fixtures ---


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Keep cached settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        MACHINA_DATA_PATH=tmp_path / "data",
        CAPABILITY_PROBE_TIMEOUT_SECONDS=0.5,
        ENABLE_TELEMETRY=False,
    )


# --- Domain Fixtures ---


@pytest.fixture
def target() -> TargetDescriptor:
    return TargetDescriptor(
        name="default",
        resource_id="res-1",
        project_name="test-project",
        provider="virtualbox",
        box_name="hashicorp/bionic64",
    )
