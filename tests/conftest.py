import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ELEVENLABS_API_KEY", "test-key")
os.environ["DEMO_MODE"] = "false"

import pytest
from unittest.mock import AsyncMock, Mock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.config import Settings
from app.core.database import Base
from app.core.dependencies import get_db, get_elevenlabs_client
from app.main import create_app
from app.models.user import ROLE_ADMIN
from app.services.elevenlabs_client import ElevenLabsClient
from tests.factories import auth_headers, create_user


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_client():
    client = Mock(spec=ElevenLabsClient)
    client.list_agents = AsyncMock(return_value={"agents": []})
    client.get_agent = AsyncMock(return_value={})
    client.update_agent = AsyncMock(return_value={"agent_id": "updated"})
    client.list_voices = AsyncMock(return_value=[])
    client.upload_knowledge_base = AsyncMock(return_value={"id": "doc_1", "name": "faq.txt"})
    client.delete_knowledge_base = AsyncMock(return_value={})
    client.list_phone_numbers = AsyncMock(return_value=[])
    return client


@pytest.fixture
def make_client(session_factory, fake_client):
    """Build a TestClient for an app created with the given settings overrides."""

    def _make(**overrides) -> TestClient:
        overrides.setdefault("DATABASE_URL", "sqlite://")
        overrides.setdefault("DEMO_MODE", False)
        app = create_app(Settings(**overrides))

        def override_get_db():
            session = session_factory()
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_elevenlabs_client] = lambda: fake_client
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def admin(db):
    return create_user(db, username="root", role=ROLE_ADMIN, email="root@example.com")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)
