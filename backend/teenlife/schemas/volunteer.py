"""
TeenLife Hours Backend — Volunteer Hour Schemas
=================================================

What:  Request/response contracts for /api/volunteer.

Type checks (is `hours` a number, is `date` a date) happen here and surface as
FastAPI's 422. Business rules (hours > 0, non-blank organization) are enforced
by VolunteerService so they hold for every caller, and surface as 400.
"""

import uuid
from datetime import date as date_type, datetime, time, timezone
from typing import Optional

from pydantic import Field, field_validator

from teenlife.schemas.common import CamelModel


def _coerce_service_date(value):
    """Accept a bare calendar date ("2024-01-01") as midnight UTC of that day."""
    if isinstance(value, date_type) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str) and len(value) == 10:
        return datetime.combine(date_type.fromisoformat(value), time.min, tzinfo=timezone.utc)
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class HourEntryCreate(CamelModel):
    """
    Body of POST /api/volunteer.

    organization, description, hours and date are required; they default to
    None here so a missing field gets the same 400 + message as a blank one.
    """
    organization: Optional[str] = None
    description: Optional[str] = None
    hours: Optional[float] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    supervisor_name: Optional[str] = None
    supervisor_email: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return _coerce_service_date(v)


class HourEntryUpdate(CamelModel):
    """
    Body of PUT /api/volunteer/{id}. Any subset of fields; only the keys the
    client actually sent are applied (`model_dump(exclude_unset=True)`).
    """
    organization: Optional[str] = None
    description: Optional[str] = None
    hours: Optional[float] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    supervisor_name: Optional[str] = None
    supervisor_email: Optional[str] = None
    verified: Optional[bool] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return _coerce_service_date(v)


class VerifyByCodeRequest(CamelModel):
    """Body of the public POST /api/volunteer/verify."""
    verification_code: Optional[str] = Field(default=None, max_length=64)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class HourEntryResponse(CamelModel):
    id: uuid.UUID
    user_id: str
    organization: str
    description: str
    location: Optional[str] = None
    supervisor_name: Optional[str] = None
    supervisor_email: Optional[str] = None
    hours: float
    date: datetime
    verified: bool
    verification_code: str = Field(description="Share with a supervisor to verify the entry")
    created_at: datetime
    updated_at: datetime


class TotalHoursResponse(CamelModel):
    total_hours: float = Field(description="Sum of verified hours")


class TierThresholdsResponse(CamelModel):
    bronze: float
    silver: float
    gold: float


class RecognitionResponse(CamelModel):
    """PVSA standing derived from approved hours; never stored."""
    approved_hours_total: float
    age: Optional[int] = None
    tier: str = Field(description="none, bronze, silver or gold")
    next_tier: str = Field(description="bronze, silver, gold, or max once gold is reached")
    thresholds: TierThresholdsResponse
    progress_percent: float = Field(ge=0, le=100)
    hours_to_next_tier: float = Field(ge=0)
