import logging
import sys
import time
from typing import Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.dependencies import HealthServiceDep, SettingsDep
from src.schemas.api.envelope import ApiResponse, envelope, utc_timestamp
from src.schemas.api.health import HealthResponse, SystemHealth

logger = logging.getLogger(__name__)

STARTED_AT = time.time()

router = APIRouter(tags=["health"])


def memory_usage() -> Dict[str, int]:
    """
    Peak resident set size in kilobytes plus page fault counts.

    Empty on platforms without the resource module (Windows).
    """
    try:
        import resource
    except ImportError:
        return {}

    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is bytes on macOS, kilobytes on Linux
    peak_rss_kb = usage.ru_maxrss // 1024 if sys.platform == "darwin" else usage.ru_maxrss
    return {
        "peakRssKb": peak_rss_kb,
        "minorPageFaults": usage.ru_minflt,
        "majorPageFaults": usage.ru_majflt,
    }


@router.get("", response_model=HealthResponse)
def health(health_service: HealthServiceDep, settings: SettingsDep):
    """Database round trip plus process diagnostics. 503 when the database is unreachable."""
    logger.info("Health check requested")

    try:
        database_health = health_service.test_connection()
        body = HealthResponse(
            status="healthy" if database_health.connected else "unhealthy",
            timestamp=utc_timestamp(),
            version=settings.app_version,
            environment=settings.environment,
            uptime=time.time() - STARTED_AT,
            memory=memory_usage(),
            database=database_health,
            features={
                "cors": settings.features.cors,
                "metrics": settings.features.metrics,
            },
        )
        return JSONResponse(
            status_code=200 if database_health.connected else 503,
            content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "timestamp": utc_timestamp(),
                "error": str(e),
                "database": {"connected": False, "error": str(e)},
            },
        )


@router.get("/system", response_model=ApiResponse[SystemHealth])
def system_health(health_service: HealthServiceDep):
    """Aggregate of the last system status rows."""
    result = health_service.get_system_health()
    if not result.success:
        logger.error(f"Failed to read system health: {result.error}")
        return envelope(500, success=False, error=result.error)
    return envelope(success=True, data=result.data)
