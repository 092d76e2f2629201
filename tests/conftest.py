"""Pytest fixtures for API testing."""
import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from questionbank.main import app
from questionbank.client.api_client import QuestionBankClient
from questionbank.client.config import ClientSettings
from questionbank.core.database import get_db
from questionbank.models.base import Base
from questionbank.models.knowledge_area import KnowledgeArea
from questionbank.models.topic import Topic

# In-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# Bound to a fresh engine per test. The foreign key pragma is switched on by the
# connect listener in questionbank.core.database, which fires once per engine.
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False)


def override_get_db():
    """Override database dependency for testing."""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def engine():
    """A private in-memory database for each test."""
    test_engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal.configure(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Create a fresh database for each test."""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client with database override.

    Note: db_session already created tables, so we don't need to create them again.
    """
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def api(db_session):
    """Async API client routed into the app in-process; use it with `async with`."""
    app.dependency_overrides[get_db] = override_get_db

    yield QuestionBankClient(
        ClientSettings(API_URL="http://testserver"),
        transport=httpx.ASGITransport(app=app)
    )

    app.dependency_overrides.clear()


@pytest.fixture
def area_hierarchy(db_session):
    """Create a test knowledge hierarchy.

    Mathematics
      Algebra
        (topic) Linear Equations
        (topic) Polynomials
      Geometry
    Physics
    """
    math = KnowledgeArea(name="Mathematics", parent_id=None)
    physics = KnowledgeArea(name="Physics", parent_id=None)
    db_session.add_all([math, physics])
    db_session.flush()

    algebra = KnowledgeArea(name="Algebra", parent_id=math.id)
    geometry = KnowledgeArea(name="Geometry", parent_id=math.id)
    db_session.add_all([algebra, geometry])
    db_session.flush()

    linear = Topic(name="Linear Equations", area_id=algebra.id)
    polynomials = Topic(name="Polynomials", area_id=algebra.id)
    db_session.add_all([linear, polynomials])
    db_session.commit()

    return {
        "math": math,
        "physics": physics,
        "algebra": algebra,
        "geometry": geometry,
        "linear": linear,
        "polynomials": polynomials,
    }
