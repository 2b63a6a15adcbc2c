"""Pytest configuration and fixtures."""

import os
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import src.services.realtime as realtime_module
from src.config import get_settings
from src.database import Base, get_db
from src.main import app
from src.models import Cat, Goodie, User
from src.models.enums import ItemCategory, Rarity
from src.services.spoon_ledger import SpoonLedger


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/baba_selo", "/baba_selo_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function", autouse=True)
def mock_redis():
    """Replace the publishing Redis client so no test needs a Redis server."""
    mock_client = MagicMock()
    realtime_module._sync_redis = mock_client
    yield mock_client
    realtime_module._sync_redis = None


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _register(client, email: str, name: str = "Test User") -> AuthHeaders:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpass123", "name": name},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return _register(client, "test@example.com")


@pytest.fixture
def admin_headers(client, monkeypatch):
    """Create a user listed in ADMIN_EMAILS."""
    monkeypatch.setattr(get_settings(), "admin_emails", "admin@example.com")
    return _register(client, "admin@example.com", name="Admin")


@pytest.fixture
def user(db):
    """A user created directly in the database, for service-level tests."""
    user = User(email="cat-lover@example.com", password_hash="not-a-real-hash", name="Cat Lover")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def goodies(db):
    """A small marketplace catalog keyed by short name."""
    catalog = {
        "kibble": Goodie(name="Basic Cat Kibble", category=ItemCategory.FOOD, rarity=Rarity.COMMON, cost=250),
        "tuna": Goodie(name="Imported Tuna Feast", category=ItemCategory.FOOD, rarity=Rarity.UNCOMMON, cost=500),
        "wagyu": Goodie(name="Aged Wagyu Tartare", category=ItemCategory.FOOD, rarity=Rarity.RARE, cost=1200),
        "mouse": Goodie(name="Simple Catnip Mouse", category=ItemCategory.TOY, rarity=Rarity.COMMON, cost=200),
        "laser": Goodie(name="Advanced Laser Pointer", category=ItemCategory.TOY, rarity=Rarity.UNCOMMON, cost=400),
        "throne": Goodie(
            name="Royal Heated Throne", category=ItemCategory.ACCESSORY, rarity=Rarity.RARE, cost=1500
        ),
        "secret": Goodie(
            name="Secret Sardines", category=ItemCategory.FOOD, rarity=Rarity.COMMON, cost=100, hidden=True
        ),
    }
    db.add_all(catalog.values())
    db.commit()
    for goodie in catalog.values():
        db.refresh(goodie)
    return catalog


@pytest.fixture
def cats(db):
    """Cats for the common and uncommon tiers only."""
    catalog = {
        "whiskers": Cat(name="Whiskers", rarity=Rarity.COMMON, reward_multiplier=1.0),
        "mittens": Cat(name="Mittens", rarity=Rarity.COMMON, reward_multiplier=1.0),
        "shadow": Cat(name="Shadow", rarity=Rarity.UNCOMMON, reward_multiplier=1.0),
    }
    db.add_all(catalog.values())
    db.commit()
    for cat in catalog.values():
        db.refresh(cat)
    return catalog


@pytest.fixture
def register_user(client):
    """Register additional users: ``register_user(email)``."""

    def _make(email: str, name: str = "Test User") -> AuthHeaders:
        return _register(client, email, name)

    return _make


@pytest.fixture
def give_spoons(db):
    """Set a user's balance and commit: ``give_spoons(user_id, amount)``."""

    def _give(user_id: int, amount: int) -> None:
        SpoonLedger(db).set_balance(user_id, amount)
        db.commit()

    return _give
