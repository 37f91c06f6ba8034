from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from sqlalchemy.orm import Session


class BaseDatabase(ABC):
    """Interface shared by database implementations."""

    @abstractmethod
    def startup(self) -> None:
        """Open the connection handle and prepare the schema."""

    @abstractmethod
    def teardown(self) -> None:
        """Release the connection handle."""

    @abstractmethod
    def get_session(self) -> AbstractContextManager[Session]:
        """Return a session context manager that commits on success."""
