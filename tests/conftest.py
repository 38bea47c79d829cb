# tests/conftest.py
import os
import sys
import pytest
from pathlib import Path

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session
from core.config import Settings
from core.sa.database import Database
from core.sa.models import Base


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_library.db")


@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    db.drop_db()
    db.init_db()

    yield db

    db.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass  # Ignore errors if file doesn't exist


@pytest.fixture(autouse=True)
def cleanup_db(database):
    """Empty every table before each test, children first"""
    with database.get_db() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
    yield


@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings():
    """Settings pinned to the documented defaults, whatever the environment says"""
    return Settings(
        database_url="sqlite://",
        loan_days=14,
        renewal_days=14,
        max_renewals=2,
        log_level="DEBUG",
        cors_origins=[],
    )
