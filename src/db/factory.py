from typing import Optional

from src.config import Settings, get_settings
from src.db.interfaces.postgresql import PostgreSQLDatabase


def make_database(settings: Optional[Settings] = None) -> PostgreSQLDatabase:
    """Factory function to create the database instance.

    The engine itself is created lazily on first use.

    :param settings: Settings instance, defaults to the cached application settings
    :returns: An instance of PostgreSQLDatabase
    """
    settings = settings or get_settings()
    return PostgreSQLDatabase(settings=settings)
