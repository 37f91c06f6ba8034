import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PROJECT_ROOT_PATH = Path(__file__).parent.parent
ENV_FILE_PATH = PROJECT_ROOT_PATH / ".env"

VALID_ENVIRONMENTS = ("development", "staging", "production", "test")
SOFT_REQUIRED_VARIABLES = ("environment", "port")


def _settings_config(env_prefix: str = "") -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=[".env", str(ENV_FILE_PATH)],
        env_prefix=env_prefix,
        extra="ignore",
        env_ignore_empty=True,
        frozen=True,
        case_sensitive=False,
    )


class BaseConfigSettings(BaseSettings):
    model_config = _settings_config()


class LoggingSettings(BaseConfigSettings):
    model_config = _settings_config("LOG_")

    level: str = "info"
    file: str = "app.log"


class ApiSettings(BaseConfigSettings):
    model_config = _settings_config("API_")

    prefix: str = "/api"


class CorsSettings(BaseConfigSettings):
    model_config = _settings_config("CORS_")

    origin: str = "*"


class RateLimitSettings(BaseConfigSettings):
    model_config = _settings_config("RATE_LIMIT_")

    window_ms: int = 900_000  # 15 minutes
    max_requests: int = 100


class DatabaseSettings(BaseConfigSettings):
    model_config = _settings_config("DB_")

    provider: str = "docker"  # "docker" or "aws-rds"
    host: str = ""
    port: int = 5432
    name: str = "user_service_db"
    user: str = "postgres_user"
    password: str = "postgres_password"
    type: str = "postgresql"
    ssl: bool = False
    auto_create_tables: bool = True

    docker_container: str = "user-service-postgres"
    docker_image: str = "postgres:16"
    docker_auto_start: bool = False

    @model_validator(mode="before")
    @classmethod
    def apply_provider_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            provider = data.get("provider", "docker")
            if provider == "docker" and not data.get("host"):
                data["host"] = "localhost"
            # RDS connections are always encrypted
            if provider == "aws-rds":
                data["ssl"] = True
        return data


class RdsSettings(BaseConfigSettings):
    model_config = _settings_config("AWS_RDS_")

    endpoint: str = ""
    region: str = "us-east-1"
    ssl_mode: str = "require"


class SecretsSettings(BaseConfigSettings):
    """Credentials injected by the secret-fetching launcher."""

    model_config = _settings_config("SECRETS_DB_")

    user: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class RedisSettings(BaseConfigSettings):
    model_config = _settings_config("REDIS_")

    host: str = "localhost"
    port: int = 6379
    password: str = ""


class JwtSettings(BaseConfigSettings):
    model_config = _settings_config("JWT_")

    secret: str = "your-super-secret-jwt-key"
    expires_in: str = "24h"


class ExternalSettings(BaseConfigSettings):
    model_config = _settings_config("EXTERNAL_API_")

    url: str = ""
    key: str = ""


class MetricsSettings(BaseConfigSettings):
    model_config = _settings_config("METRICS_")

    port: int = 9090


class FeatureSettings(BaseConfigSettings):
    model_config = _settings_config("ENABLE_")

    user_management: bool = True
    advanced_logging: bool = False
    console_logging: bool = False
    cors: bool = False
    metrics: bool = False


class Settings(BaseConfigSettings):
    app_name: str = "user-service"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production", "test"] = "development"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    database_url: Optional[str] = None
    health_check_endpoint: str = "/health"

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    rds: RdsSettings = Field(default_factory=RdsSettings)
    secrets: SecretsSettings = Field(default_factory=SecretsSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    jwt: JwtSettings = Field(default_factory=JwtSettings)
    external: ExternalSettings = Field(default_factory=ExternalSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)
    features: FeatureSettings = Field(default_factory=FeatureSettings)

    @model_validator(mode="before")
    @classmethod
    def warn_missing_required(cls, data: Any) -> Any:
        """Missing or empty ENVIRONMENT / PORT only produce a warning; defaults apply."""
        if isinstance(data, dict):
            missing = [
                name.upper() for name in SOFT_REQUIRED_VARIABLES if data.get(name) in (None, "")
            ]
            if missing:
                logger.warning(f"Missing environment variables: {', '.join(missing)}")
                logger.warning("Using default values...")
                data = {key: value for key, value in data.items() if key.upper() not in missing}
        return data

    @field_validator("environment", mode="before")
    @classmethod
    def fallback_unknown_environment(cls, value: Any) -> Any:
        if value not in VALID_ENVIRONMENTS:
            logger.warning(f"Unknown environment '{value}'. Using 'development'.")
            return "development"
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_staging(self) -> bool:
        return self.environment == "staging"


def get_database_url(settings: Settings) -> str:
    """Build a connection string from local configuration only."""
    db = settings.database
    return f"{db.type}://{db.user}:{db.password}@{db.host}:{db.port}/{db.name}"


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
