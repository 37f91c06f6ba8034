import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from src.config import Settings, get_database_url
from src.db.interfaces.base import BaseDatabase
from src.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

Base = declarative_base()


def resolve_database_url(settings: Settings) -> str:
    """Pick the connection string: explicit URL, then fetched secrets, then local defaults."""
    if settings.database_url:
        return settings.database_url

    db = settings.database
    secrets = settings.secrets
    if settings.is_production and secrets.user:
        host = settings.rds.endpoint or db.host
        password = secrets.password or db.password
        name = secrets.name or db.name
        return (
            f"{db.type}://{secrets.user}:{password}@{host}:{db.port}/{name}"
            f"?sslmode={settings.rds.ssl_mode}"
        )

    return get_database_url(settings)


def mask_database_url(url: str) -> str:
    return re.sub(r"(//[^:/@]+):[^@]*@", r"\1:****@", url)


class PostgreSQLDatabase(BaseDatabase):
    """SQLAlchemy database owning a single, lazily created engine."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory

    def _create_engine(self) -> Engine:
        url = resolve_database_url(self.settings)
        logger.info(f"Connecting to database: {mask_database_url(url)}")

        kwargs: Dict[str, Any] = {"pool_pre_ping": True}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every checkout sees an empty database
                kwargs["poolclass"] = StaticPool

        return create_engine(url, **kwargs)

    def startup(self) -> None:
        """Initialize the database connection."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                logger.info("Database connection test successful")

            if self.settings.database.auto_create_tables:
                self.create_tables()

            logger.info(f"Database: {self.engine.url.database}")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise DatabaseConnectionError(str(e)) from e

    def create_tables(self) -> None:
        # Import models so Base knows about them
        from src.models import health_check, system_status, user  # noqa: F401

        inspector = inspect(self.engine)
        existing_tables = set(inspector.get_table_names())

        Base.metadata.create_all(bind=self.engine)

        new_tables = set(inspect(self.engine).get_table_names()) - existing_tables
        if new_tables:
            logger.info(f"Created new tables: {', '.join(sorted(new_tables))}")
        else:
            logger.info("All tables already exist")

    def teardown(self) -> None:
        """Close the database connection."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database connections closed")
        self._engine = None
        self._session_factory = None

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.session_factory()
        try:
            yield session
            session.commit()  # Auto-commit on success
        except Exception:
            session.rollback()  # Auto-rollback on error
            raise
        finally:
            session.close()
