"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite database before anything imports settings.
"""

import os
import sys
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["LLM_DEFAULT_LANGUAGE"] = "ru"

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest

import domain.models  # noqa: F401  registers every table on Base.metadata
from domain.models import Base, engine


@pytest.fixture(autouse=True)
def fresh_database():
    """
    Give every test empty tables.

    The engine uses a single shared in-memory connection, so dropping and
    recreating the schema is enough to isolate tests from each other.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Undo any app.dependency_overrides a test installed"""
    yield
    from main import app

    app.dependency_overrides.clear()
