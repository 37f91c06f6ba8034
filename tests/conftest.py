import os
import tempfile
from contextlib import contextmanager

# src.main builds the app from the environment at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PORT", "3000")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "user-service-tests.log"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.config import Settings
from src.db.interfaces.base import BaseDatabase
from src.db.interfaces.postgresql import PostgreSQLDatabase
from src.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", port=3000, database_url="sqlite://")


@pytest.fixture
def database(settings):
    database = PostgreSQLDatabase(settings)
    database.create_tables()
    yield database
    database.teardown()


@pytest.fixture
def client(settings, database):
    with TestClient(create_app(settings, database)) as client:
        yield client


class FlakyDatabase(BaseDatabase):
    """Wraps a real database and fails the first `failures` sessions."""

    def __init__(self, inner: BaseDatabase, failures: int = 1):
        self.inner = inner
        self.failures = failures

    def startup(self) -> None:
        self.inner.startup()

    def teardown(self) -> None:
        self.inner.teardown()

    @contextmanager
    def get_session(self):
        if self.failures > 0:
            self.failures -= 1
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))
        with self.inner.get_session() as session:
            yield session


@pytest.fixture
def flaky_database(database):
    return FlakyDatabase(database)
