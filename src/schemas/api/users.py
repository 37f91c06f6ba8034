from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserPayload(BaseModel):
    """Request body for creating or updating a user. Presence is checked by the route."""

    name: Optional[str] = Field(None, description="Display name", examples=["Jane Smith"])
    email: Optional[str] = Field(None, description="Email address", examples=["jane@example.com"])


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
