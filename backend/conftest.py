"""
Pytest configuration and fixtures for testing.

Two database modes:
- TEST_DATABASE_URL set (e.g. in .env.local): PostgreSQL test database,
  schema brought to head with Alembic once per session, every test in its
  own transaction that is rolled back afterwards.
- Otherwise: a fresh in-memory SQLite database per test, schema created
  from the models.

Running Tests (from repo root):
    pytest                                            # All tests
    pytest backend/db/__tests__/test_filters.py -v    # One module
    pytest backend/api/__tests__/ -v                  # All route tests
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).parent

# Load environment variables (.env.local takes precedence over .env)
env_local = BACKEND_DIR / '.env.local'
env_file = BACKEND_DIR / '.env'

if env_local.exists():
    load_dotenv(env_local)
elif env_file.exists():
    load_dotenv(env_file)

# App modules read these at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth.utils import create_access_token
from db.session import get_db, make_engine
from db.__tests__.db_test_utils import seed_database
from main import app
from models import Base

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest.fixture(scope="session")
def postgres_engine():
    """
    Create PostgreSQL test engine and run migrations (TEST_DATABASE_URL only).

    - Runs once per test session
    - Ensures test database matches production schema
    """
    from alembic.config import Config
    from alembic import command

    engine = make_engine(TEST_DATABASE_URL)

    # Verify connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        raise ConnectionError(
            f"Failed to connect to test database.\n"
            f"Error: {e}\n"
            f"Please verify TEST_DATABASE_URL in .env.local is correct."
        )

    alembic_cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", TEST_DATABASE_URL)
    command.upgrade(alembic_cfg, "head")

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def test_db(request):
    """
    Create a database session for each test.

    - PostgreSQL: outer transaction rolled back after the test; service
      commits/rollbacks only touch a savepoint
    - SQLite: brand new in-memory database, discarded after the test

    Usage:
        def test_create_company(test_db):
            company = create_company(test_db, "acme", "Acme", "Anvils")
            assert company.handle == "acme"
    """
    if TEST_DATABASE_URL:
        engine = request.getfixturevalue("postgres_engine")
        connection = engine.connect()
        transaction = connection.begin()

        TestSessionLocal = sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
        db = TestSessionLocal()

        try:
            yield db
        finally:
            db.close()
            if transaction.is_active:
                transaction.rollback()
            connection.close()
        return

    # check_same_thread=False: TestClient calls the app from another thread
    engine = make_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    TestSessionLocal = sessionmaker(bind=engine, autoflush=False)
    db = TestSessionLocal()

    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def job_ids(test_db):
    """Seed companies c1-c3 and jobs j1-j4 (see db_test_utils); return job ids."""
    return seed_database(test_db)


@pytest.fixture
def client(test_db):
    """Test client whose requests use the test session."""

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token({"username": "u1", "isAdmin": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token({"username": "u2", "isAdmin": False})
    return {"Authorization": f"Bearer {token}"}
