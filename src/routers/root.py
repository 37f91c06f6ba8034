import logging

from fastapi import APIRouter

from src.dependencies import SettingsDep
from src.schemas.api.envelope import utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(tags=["root"])


@router.get("/")
def root(settings: SettingsDep):
    """Welcome message listing the available endpoints."""
    health = settings.health_check_endpoint
    users = f"{settings.api.prefix}/users"

    logger.info("Root endpoint accessed")
    return {
        "message": f"Welcome to {settings.app_name} API",
        "status": "running",
        "timestamp": utc_timestamp(),
        "version": settings.app_version,
        "endpoints": [
            "GET / - This welcome message",
            f"GET {health} - Health check endpoint",
            f"GET {health}/system - Recent system status",
            f"GET {users} - Get all users",
            f"GET {users}/:id - Get user by ID",
            f"POST {users} - Create new user",
            f"PUT {users}/:id - Update user by ID",
            f"DELETE {users}/:id - Delete user by ID",
        ],
    }
