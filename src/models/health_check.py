from sqlalchemy import JSON, Column, DateTime, Integer, String

from src.db.interfaces.postgresql import Base
from src.models.user import utc_now


class HealthCheck(Base):
    """Append-only record written by every successful health check."""

    __tablename__ = "health_checks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    status = Column(String, nullable=False)
    # "metadata" is reserved on declarative classes
    check_metadata = Column("metadata", JSON, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
