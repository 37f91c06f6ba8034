from sqlalchemy import Column, DateTime, Integer, String, Text

from src.db.interfaces.postgresql import Base
from src.models.user import utc_now


class SystemStatus(Base):
    """Append-only health history, one row per health check outcome."""

    __tablename__ = "system_status"

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_name = Column(String, nullable=False)
    status = Column(String, nullable=False)  # healthy | unhealthy

    # only set on success
    response_time = Column(Integer, nullable=True)
    # only set on failure
    error_message = Column(Text, nullable=True)

    checked_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
