import os
import uuid

# Настройки читаются при импорте приложения, поэтому env выставляем до него
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from src.subtrack.main import app as fastapi_app
from src.subtrack.api.deps import get_uow
from src.subtrack.infra.db import Base, make_engine, make_session_factory
from src.subtrack.infra import models  # noqa: F401
from src.subtrack.domain.value_objects import SubscriptionInput
from src.subtrack.tests.fakes import FakeUoW


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def app(uow):
    """
    FastAPI app с подменённым Unit of Work (in-memory), без реальной БД.
    """
    fastapi_app.dependency_overrides[get_uow] = lambda: uow
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    """
    HTTP client поверх ASGI приложения (без реального поднятия сервера).
    Важно: для httpx>=0.28 нужно использовать ASGITransport.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def session_factory():
    """
    In-memory SQLite с той же схемой, что и в Postgres-миграции.
    """
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    try:
        yield make_session_factory(engine)
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(session_factory) -> Session:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def make_input(user_id):
    def _make(
        service_name: str = "Yandex Plus",
        price: int = 400,
        start_date: str = "07-2025",
        end_date: str | None = None,
        user: str | None = None,
    ) -> SubscriptionInput:
        return SubscriptionInput(
            service_name=service_name,
            price=price,
            user_id=user or user_id,
            start_date=start_date,
            end_date=end_date,
        )

    return _make
