from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class DatabaseInfo(CamelModel):
    type: str = Field(..., description="Database engine", examples=["postgresql"])
    status: str = Field(..., description="Database status", examples=["healthy"])


class DatabaseOperations(CamelModel):
    """
    Result of the write-then-read round trip
    """
    write: bool
    read: bool
    last_health_check_id: int
    recent_checks_count: int


class DatabaseHealth(CamelModel):
    """
    Database health payload returned by the connection test
    """
    connected: bool = Field(..., description="Whether the round trip succeeded")
    response_time: Optional[int] = Field(None, description="Round trip latency in milliseconds")
    database: DatabaseInfo
    operations: Optional[DatabaseOperations] = None
    metadata: Optional[Dict[str, Any]] = None
    error: Optional[str] = Field(None, description="Underlying error message")
    code: Optional[str] = Field(None, description="Underlying error code")


class HealthResponse(CamelModel):
    """
    Overall health status
    """
    status: str = Field(..., description="Overall status", examples=["healthy"])
    timestamp: str
    version: str = Field(..., description="The version of the service", examples=["1.0.0"])
    environment: str = Field(..., description="The environment of the service", examples=["development"])
    uptime: float = Field(..., description="Seconds since the service started")
    memory: Dict[str, int] = Field(..., description="Peak resident set size (KB) and page faults")
    database: DatabaseHealth
    features: Dict[str, bool]


class SystemStatusRecord(CamelModel):
    id: int
    service_name: str
    status: str
    response_time: Optional[int] = None
    error_message: Optional[str] = None
    checked_at: datetime


class SystemHealth(CamelModel):
    """
    Aggregate of the most recent system status rows
    """
    overall_health: str = Field(..., examples=["healthy", "degraded"])
    healthy_services: int
    total_services: int
    recent_status: List[SystemStatusRecord]
