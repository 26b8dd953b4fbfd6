"""
Pytest configuration and fixtures
"""

from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.core.database import get_db
from app.main import app
from app.models.file_node import FileNode
from app.services.file_tree import FileTreeService
from app.services.object_storage import ObjectStorageClient, get_object_storage

# In-memory database shared by every session of a test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

OBJECT_STORAGE_URL = "http://storage.test/drive"

_ = (FileNode,)  # Register the table with SQLModel metadata


class FakeObjectStore:
    """Object store double served through httpx.MockTransport"""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.requests: list[tuple[str, str]] = []
        self.fail_uploads = False
        self.fail_deletes = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append((request.method, url))

        if request.method == "PUT":
            if self.fail_uploads:
                return httpx.Response(500)
            self.objects[url] = request.content
            return httpx.Response(201)

        if request.method == "DELETE":
            if self.fail_deletes:
                return httpx.Response(500)
            if self.objects.pop(url, None) is None:
                return httpx.Response(404)
            return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create a fresh schema for each test"""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a database session for each test"""
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_maker() as session:
        yield session


@pytest.fixture(scope="function")
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture(scope="function")
def storage(object_store: FakeObjectStore) -> ObjectStorageClient:
    return ObjectStorageClient(
        OBJECT_STORAGE_URL,
        token="test-token",
        transport=httpx.MockTransport(object_store.handler),
    )


@pytest.fixture(scope="function")
def service(db_session: AsyncSession, storage: ObjectStorageClient) -> FileTreeService:
    """File tree service with a small page size so listings span several pages"""
    return FileTreeService(db_session, storage, enforce_unique_names=True, page_size=2)


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession, storage: ObjectStorageClient) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session and object storage overrides"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
