"""Общие фикстуры тестов"""
import os

os.environ.setdefault("DB_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from auth.utils import get_password_hash
from config.database import Base, get_db
from config.redis import get_redis
from files.service import FileService
from files.storage import BlobStorage, get_storage
from jobs.dependencies import get_thumbnail_queue, get_user_queue
from jobs.queue import THUMBNAIL_TASK, WELCOME_TASK, JobQueue
from models.user import User


class Clock:
    """Часы, которые двигаются вручную, для проверки TTL"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """Redis в памяти: только команды, которые использует сервис"""

    def __init__(self, clock: Clock):
        self.clock = clock
        self.values = {}
        self.expires_at = {}

    def _expire(self, key):
        deadline = self.expires_at.get(key)
        if deadline is not None and deadline <= self.clock():
            self.values.pop(key, None)
            self.expires_at.pop(key, None)

    async def ping(self):
        return True

    async def get(self, key):
        self._expire(key)
        return self.values.get(key)

    async def set(self, key, value, ex=None):
        self.values[key] = str(value)
        if ex is not None:
            self.expires_at[key] = self.clock() + ex
        else:
            self.expires_at.pop(key, None)
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            self._expire(key)
            if key in self.values:
                removed += 1
            self.values.pop(key, None)
            self.expires_at.pop(key, None)
        return removed


class RecordingCelery:
    """Вместо брокера запоминает отправленные задачи"""

    def __init__(self):
        self.sent = []

    def send_task(self, name, args=None, kwargs=None, queue=None, **options):
        self.sent.append({"task": name, "args": list(args or []), "queue": queue})

    def payloads(self, queue):
        return [message["args"][0] for message in self.sent if message["queue"] == queue]


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def redis(clock):
    return FakeRedis(clock)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return BlobStorage(str(tmp_path / "files_manager"))


@pytest.fixture
def celery():
    return RecordingCelery()


@pytest.fixture
def thumbnail_queue(celery):
    return JobQueue(celery, "fileQueue", THUMBNAIL_TASK)


@pytest.fixture
def user_queue(celery):
    return JobQueue(celery, "userQueue", WELCOME_TASK)


@pytest.fixture
def service(db, storage, thumbnail_queue):
    return FileService(db, storage, thumbnail_queue)


@pytest.fixture
def make_user(db):
    """Создает пользователя прямо в хранилище"""
    async def _make_user(email="bob@dylan.com", password="toto1234!"):
        user = User(email=email, hashed_password=get_password_hash(password))
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user
    return _make_user


@pytest_asyncio.fixture
async def client(session_factory, redis, storage, thumbnail_queue, user_queue):
    from main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_redis():
        return redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_thumbnail_queue] = lambda: thumbnail_queue
    app.dependency_overrides[get_user_queue] = lambda: user_queue
    FastAPICache.init(InMemoryBackend(), prefix="test-cache")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
