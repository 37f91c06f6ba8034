from typing import Annotated

from fastapi import Depends, Request

from src.config import Settings
from src.db.interfaces.base import BaseDatabase
from src.services.health import HealthService
from src.services.users import UserService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> BaseDatabase:
    """The database owned by the application, created in create_app()."""
    return request.app.state.database


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[BaseDatabase, Depends(get_database)]


def get_user_service(database: DatabaseDep) -> UserService:
    return UserService(database)


def get_health_service(database: DatabaseDep, settings: SettingsDep) -> HealthService:
    return HealthService(database, settings)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
HealthServiceDep = Annotated[HealthService, Depends(get_health_service)]
