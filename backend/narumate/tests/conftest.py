"""
Shared fixtures: SQLite-backed session factory, fakes and an API client.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from narumate.api.dependencies import chat_sessions, get_conversation_store, get_generator, get_mood_store
from narumate.db.base import Base
from narumate.db.session import init_db
from narumate.main import app
from narumate.tests.fakes import FakeClock, FakeConversationStore, FakeGenerator, FakeMoodStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

    # SQLite only honours ON DELETE CASCADE with foreign keys switched on
    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def conversation_store(clock):
    return FakeConversationStore(clock)


@pytest.fixture
def mood_store(clock):
    return FakeMoodStore(clock)


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def client(conversation_store, mood_store, generator):
    """API client wired to in-memory stores and a fake generator."""
    app.dependency_overrides[get_conversation_store] = lambda: conversation_store
    app.dependency_overrides[get_mood_store] = lambda: mood_store
    app.dependency_overrides[get_generator] = lambda: generator
    chat_sessions.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    chat_sessions.clear()


@pytest.fixture
def local_client(generator):
    """API client in local mode: no stores at all."""
    app.dependency_overrides[get_conversation_store] = lambda: None
    app.dependency_overrides[get_mood_store] = lambda: None
    app.dependency_overrides[get_generator] = lambda: generator
    chat_sessions.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    chat_sessions.clear()
