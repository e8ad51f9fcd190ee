"""
TeenLife Hours Backend — Shared Response Schemas
==================================================

What:  The success envelope, error body and health payload shared by all routes.

Every successful response has the shape the mobile client already parses:
    {"success": true, "data": ..., "message": "..."}

JSON keys are camelCase on the wire (`alias_generator=to_camel`); snake_case
input is accepted too (`populate_by_name`).
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for every API schema: camelCase aliases, ORM attribute loading."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    success: bool = Field(default=True)
    data: Optional[T] = Field(default=None)
    message: Optional[str] = Field(default=None, description="Human-readable outcome")


class ErrorResponse(CamelModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "success": false,
            "error": "forbidden",
            "message": "You do not have access to this entry",
            "request_id": "a1b2c3d4"
        }
    """
    success: bool = Field(default=False)
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
