"""
TeenLife Hours Backend — Volunteer Hour Route Handlers
========================================================

What:  /api/volunteer endpoints: CRUD for the caller's hour entries, the
       approved total, PVSA recognition, and public code verification.
How:   Thin handlers: resolve the caller, delegate to VolunteerService, wrap
       the result in the {success, data, message} envelope.

Route Inventory:
    POST   /api/volunteer               create entry (201)
    GET    /api/volunteer               list caller's entries
    GET    /api/volunteer/total         approved hours total
    GET    /api/volunteer/recognition   PVSA tier / progress (?age=)
    POST   /api/volunteer/verify        verify by code (NO auth)
    GET    /api/volunteer/{id}          get entry
    PUT    /api/volunteer/{id}          update entry
    DELETE /api/volunteer/{id}          delete entry

The static paths are declared before /{entry_id} so they are matched first.
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from teenlife.auth.dependencies import get_current_user_id
from teenlife.database import get_db_session
from teenlife.schemas.common import ApiResponse, ErrorResponse
from teenlife.schemas.volunteer import (
    HourEntryCreate,
    HourEntryResponse,
    HourEntryUpdate,
    RecognitionResponse,
    TierThresholdsResponse,
    TotalHoursResponse,
    VerifyByCodeRequest,
)
from teenlife.services.recognition import compute_tier
from teenlife.services.volunteer_service import volunteer_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/volunteer", tags=["Volunteer Hours"])

_OWNER_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Entry belongs to another user", "model": ErrorResponse},
    404: {"description": "Entry not found", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[HourEntryResponse],
    responses={
        400: {"description": "Missing field or hours <= 0", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
    summary="Log volunteer hours",
)
async def create_entry(
    body: HourEntryCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[HourEntryResponse]:
    """The response includes the verification code to hand to a supervisor."""
    entry = await volunteer_service.create_entry(db, owner_id=user_id, data=body)
    return ApiResponse(
        data=HourEntryResponse.model_validate(entry),
        message="Volunteer hour entry created successfully",
    )


@router.get(
    "",
    response_model=ApiResponse[List[HourEntryResponse]],
    summary="List the caller's volunteer hours",
)
async def list_entries(
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    organization: Optional[str] = Query(
        default=None, description="Case-insensitive substring match on organization"
    ),
    verified: Optional[bool] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[HourEntryResponse]]:
    entries = await volunteer_service.list_entries(
        db,
        owner_id=user_id,
        start_date=start_date,
        end_date=end_date,
        organization=organization,
        verified=verified,
    )
    return ApiResponse(data=[HourEntryResponse.model_validate(e) for e in entries])


@router.get(
    "/total",
    response_model=ApiResponse[TotalHoursResponse],
    summary="Total approved (verified) hours",
)
async def get_total(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[TotalHoursResponse]:
    total = await volunteer_service.compute_total(db, user_id)
    return ApiResponse(data=TotalHoursResponse(total_hours=total))


@router.get(
    "/recognition",
    response_model=ApiResponse[RecognitionResponse],
    summary="PVSA tier and progress",
    description=(
        "Computes the President's Volunteer Service Award tier from approved hours. "
        "Pass `age` to use the 11-15 band; without it the 16+ band applies."
    ),
)
async def get_recognition(
    age: Optional[int] = Query(default=None, ge=0, le=130),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[RecognitionResponse]:
    total = await volunteer_service.compute_total(db, user_id)
    state = compute_tier(total, age, volunteer_service.recognition_config)
    return ApiResponse(
        data=RecognitionResponse(
            approved_hours_total=state.approved_hours_total,
            age=age,
            tier=state.tier,
            next_tier=state.next_tier,
            thresholds=TierThresholdsResponse(
                bronze=state.thresholds.bronze,
                silver=state.thresholds.silver,
                gold=state.thresholds.gold,
            ),
            progress_percent=state.progress_percent,
            hours_to_next_tier=state.hours_to_next_tier,
        )
    )


@router.post(
    "/verify",
    response_model=ApiResponse[HourEntryResponse],
    responses={
        400: {"description": "Verification code missing", "model": ErrorResponse},
        404: {"description": "Verification code not found", "model": ErrorResponse},
        429: {"description": "Too many verification attempts", "model": ErrorResponse},
    },
    summary="Verify hours by code (supervisors, no login)",
)
async def verify_by_code(
    body: VerifyByCodeRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[HourEntryResponse]:
    """
    Public endpoint: the verification code is the only credential.
    Rate limited per IP by RateLimitMiddleware.
    """
    entry = await volunteer_service.verify_by_code(db, body.verification_code)
    return ApiResponse(
        data=HourEntryResponse.model_validate(entry),
        message="Volunteer hour verified successfully",
    )


@router.get(
    "/{entry_id}",
    response_model=ApiResponse[HourEntryResponse],
    responses=_OWNER_ERRORS,
    summary="Get one volunteer hour entry",
)
async def get_entry(
    entry_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[HourEntryResponse]:
    entry = await volunteer_service.get_entry(db, entry_id, user_id)
    return ApiResponse(data=HourEntryResponse.model_validate(entry))


@router.put(
    "/{entry_id}",
    response_model=ApiResponse[HourEntryResponse],
    responses={**_OWNER_ERRORS, 400: {"description": "Invalid field value", "model": ErrorResponse}},
    summary="Update a volunteer hour entry",
)
async def update_entry(
    entry_id: UUID,
    body: HourEntryUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[HourEntryResponse]:
    entry = await volunteer_service.update_entry(db, entry_id, user_id, body)
    return ApiResponse(
        data=HourEntryResponse.model_validate(entry),
        message="Volunteer hour entry updated successfully",
    )


@router.delete(
    "/{entry_id}",
    response_model=ApiResponse[None],
    responses=_OWNER_ERRORS,
    summary="Delete a volunteer hour entry",
)
async def delete_entry(
    entry_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[None]:
    await volunteer_service.delete_entry(db, entry_id, user_id)
    return ApiResponse(message="Volunteer hour entry deleted successfully")
