"""Test fixtures for the accommodation service."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from decimal import Decimal
from io import BytesIO
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.pop("REDIS_URL", None)

from accommodation_api.api import deps
from accommodation_api.core.config import get_settings
from accommodation_api.db.base import Base
from accommodation_api.db.session import dispose_engine, get_sessionmaker
from accommodation_api.integrations import S3Client
from accommodation_api.main import app
from accommodation_api.models import Accommodation
from accommodation_api.repositories import Repositories, build_repositories
from accommodation_api.security.identity import CallerIdentity, UserRole

HOST_ID = "host-1"
OTHER_HOST_ID = "host-2"


def identity_headers(
    user_id: str = HOST_ID, role: str = "host", email: str | None = "host@example.com"
) -> dict[str, str]:
    """Headers the gateway injects for an authenticated caller."""
    headers = {"X-User-Id": user_id, "X-User-Role": role}
    if email:
        headers["X-User-Email"] = email
    return headers


def make_image(fmt: str = "JPEG", size: tuple[int, int] = (32, 24)) -> bytes:
    image = Image.new("RGB", size, color=(40, 120, 200))
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def session(reset_database: None, db_url: str) -> AsyncIterator[AsyncSession]:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as db_session:
        yield db_session


@pytest.fixture()
def repos(session: AsyncSession) -> Repositories:
    return build_repositories(session)


@pytest.fixture()
def s3_client(tmp_path: Path) -> S3Client:
    return S3Client(
        "test-photos",
        public_url="https://cdn.example.test/test-photos",
        root=tmp_path / "storage",
    )


@pytest.fixture()
def photo_path(tmp_path: Path):
    """Resolve a photo key to its file inside the test object store."""

    def _resolve(key: str) -> Path:
        return tmp_path / "storage" / "test-photos" / key

    return _resolve


@pytest.fixture()
def host() -> CallerIdentity:
    return CallerIdentity(id=HOST_ID, email="host@example.com", role=UserRole.HOST)


@pytest.fixture()
def other_host() -> CallerIdentity:
    return CallerIdentity(id=OTHER_HOST_ID, role=UserRole.HOST)


@pytest.fixture()
def accommodation_factory(repos: Repositories):
    """Persist accommodations with sensible defaults."""

    async def _create(**overrides: object) -> Accommodation:
        values: dict[str, object] = {
            "name": "Lakeside Cabin",
            "location": "Lake Bled, Slovenia",
            "amenities": ["wifi", "parking"],
            "photo_keys": [],
            "min_guests": 1,
            "max_guests": 4,
            "host_id": HOST_ID,
            "auto_approve": False,
            "is_per_unit": False,
            "base_price": Decimal("100.00"),
        }
        values.update(overrides)
        return await repos.accommodations.add(Accommodation(**values))

    return _create


@pytest_asyncio.fixture()
async def client(
    reset_database: None, s3_client: S3Client
) -> AsyncIterator[AsyncClient]:
    """Async client against the app with a temporary object store."""
    app.dependency_overrides[deps.get_s3_client] = lambda: s3_client
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            yield http
    finally:
        app.dependency_overrides.pop(deps.get_s3_client, None)


@pytest.fixture()
def image_bytes():
    """Factory for small valid images."""
    return make_image


@pytest.fixture()
def auth_headers():
    """Factory for gateway identity headers."""
    return identity_headers
