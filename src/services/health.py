import logging
import time

import sqlalchemy
from sqlalchemy import select, text

from src.config import Settings
from src.db.interfaces.base import BaseDatabase
from src.models.health_check import HealthCheck
from src.models.system_status import SystemStatus
from src.schemas.api.envelope import utc_timestamp
from src.schemas.api.health import (
    DatabaseHealth,
    DatabaseInfo,
    DatabaseOperations,
    SystemHealth,
    SystemStatusRecord,
)
from src.services.results import Failure, Result, Success, error_code

logger = logging.getLogger(__name__)

SERVICE_NAME = "database"
RECENT_HEALTH_CHECKS = 5
RECENT_STATUS_ROWS = 10


class HealthService:
    """Database round-trip checks and the system status history built from them."""

    def __init__(self, database: BaseDatabase, settings: Settings):
        self.database = database
        self.settings = settings

    @property
    def database_type(self) -> str:
        return self.settings.database.type

    def test_connection(self) -> DatabaseHealth:
        """
        Write a HealthCheck row, read back the latest ones and record the outcome.

        Exactly one SystemStatus row is appended per call: "healthy" with the
        measured latency, or "unhealthy" with the error message.
        """
        try:
            start = time.perf_counter()
            with self.database.get_session() as session:
                session.execute(text("SELECT 1"))

                record = HealthCheck(
                    status="healthy",
                    check_metadata={
                        "environment": self.settings.environment,
                        "timestamp": utc_timestamp(),
                        "version": self.settings.app_version,
                    },
                )
                session.add(record)
                session.flush()

                recent_checks = session.scalars(
                    select(HealthCheck)
                    .order_by(HealthCheck.timestamp.desc(), HealthCheck.id.desc())
                    .limit(RECENT_HEALTH_CHECKS)
                ).all()

                response_time = int((time.perf_counter() - start) * 1000)
                session.add(
                    SystemStatus(
                        service_name=SERVICE_NAME,
                        status="healthy",
                        response_time=response_time,
                    )
                )

            return DatabaseHealth(
                connected=True,
                response_time=response_time,
                database=DatabaseInfo(type=self.database_type, status="healthy"),
                operations=DatabaseOperations(
                    write=True,
                    read=True,
                    last_health_check_id=record.id,
                    recent_checks_count=len(recent_checks),
                ),
                metadata={
                    "sqlalchemyVersion": sqlalchemy.__version__,
                    "environment": self.settings.environment,
                },
            )
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            self._record_unhealthy(str(e))
            return DatabaseHealth(
                connected=False,
                error=str(e),
                code=error_code(e),
                database=DatabaseInfo(type=self.database_type, status="unhealthy"),
            )

    def _record_unhealthy(self, error_message: str) -> None:
        # Best effort: a failure here is logged and never escalated
        try:
            with self.database.get_session() as session:
                session.add(
                    SystemStatus(
                        service_name=SERVICE_NAME,
                        status="unhealthy",
                        error_message=error_message,
                    )
                )
        except Exception as log_error:
            logger.error(f"Failed to log system status: {log_error}")

    def get_system_health(self) -> Result[SystemHealth]:
        try:
            with self.database.get_session() as session:
                rows = session.scalars(
                    select(SystemStatus)
                    .order_by(SystemStatus.checked_at.desc(), SystemStatus.id.desc())
                    .limit(RECENT_STATUS_ROWS)
                ).all()
                recent_status = [SystemStatusRecord.model_validate(row) for row in rows]

            healthy = sum(1 for status in recent_status if status.status == "healthy")
            total = len(recent_status)
            return Success(
                data=SystemHealth(
                    overall_health="healthy" if healthy == total else "degraded",
                    healthy_services=healthy,
                    total_services=total,
                    recent_status=recent_status,
                )
            )
        except Exception as e:
            logger.error(f"Error reading system health: {e}")
            return Failure.from_exception(e)
