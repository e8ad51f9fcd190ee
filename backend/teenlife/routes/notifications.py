"""
TeenLife Hours Backend — Notification Feed Route Handlers
===========================================================

What:  /api/notifications endpoints consumed by the mobile notification bell
       and notifications screen. All routes require a bearer token and only
       ever touch the caller's own notifications.

Route Inventory:
    GET    /api/notifications             list (limit, offset, isRead, type)
    GET    /api/notifications/unread      unread count for the bell badge
    PUT    /api/notifications/read-all    mark all read
    PUT    /api/notifications/{id}/read   mark one read
    DELETE /api/notifications/{id}        delete one
    POST   /api/notifications/test        development only
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from teenlife.auth.dependencies import get_current_user_id
from teenlife.config import settings
from teenlife.database import get_db_session
from teenlife.exceptions import DatabaseError, NotFoundError
from teenlife.models.notification import NOTIFICATION_TYPES
from teenlife.schemas.common import ApiResponse, ErrorResponse
from teenlife.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from teenlife.services.notification_service import notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=ApiResponse[NotificationListResponse],
    summary="List the caller's notifications, newest first",
)
async def list_notifications(
    response: Response,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    is_read: Optional[bool] = Query(default=None, alias="isRead"),
    type_: Optional[str] = Query(
        default=None,
        alias="type",
        description=f"One of: {', '.join(NOTIFICATION_TYPES)}",
    ),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[NotificationListResponse]:
    notifications, total = await notification_service.list_notifications(
        db, user_id, limit=limit, offset=offset, is_read=is_read, type_=type_
    )
    response.headers["X-Total-Count"] = str(total)
    return ApiResponse(
        data=NotificationListResponse(
            notifications=[NotificationResponse.from_model(n) for n in notifications],
            total=total,
            limit=limit,
            offset=offset,
        )
    )


@router.get(
    "/unread",
    response_model=ApiResponse[UnreadCountResponse],
    summary="Unread notification count",
)
async def get_unread_count(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UnreadCountResponse]:
    count = await notification_service.unread_count(db, user_id)
    return ApiResponse(data=UnreadCountResponse(count=count))


@router.post(
    "/test",
    status_code=201,
    response_model=ApiResponse[NotificationResponse],
    responses={404: {"description": "Not available outside development", "model": ErrorResponse},
               500: {"description": "Notification could not be saved", "model": ErrorResponse}},
    summary="Create a test notification (development only)",
)
async def create_test_notification(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[NotificationResponse]:
    if not settings.is_development:
        raise NotFoundError(resource="endpoint", message="Not found")
    notification = await notification_service.create_test_notification(db, user_id)
    if notification is None:
        raise DatabaseError(
            message="Test notification could not be created",
            context={"user_id": user_id, "category": "test"},
        )
    return ApiResponse(
        data=NotificationResponse.from_model(notification),
        message="Test notification created successfully",
    )


@router.put(
    "/read-all",
    response_model=ApiResponse[MarkAllReadResponse],
    summary="Mark all notifications as read",
)
async def mark_all_read(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[MarkAllReadResponse]:
    updated = await notification_service.mark_all_read(db, user_id)
    return ApiResponse(
        data=MarkAllReadResponse(updated=updated),
        message="All notifications marked as read",
    )


@router.put(
    "/{notification_id}/read",
    response_model=ApiResponse[None],
    responses={404: {"description": "Notification not found", "model": ErrorResponse}},
    summary="Mark one notification as read",
)
async def mark_read(
    notification_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[None]:
    await notification_service.mark_read(db, notification_id, user_id)
    return ApiResponse(message="Notification marked as read")


@router.delete(
    "/{notification_id}",
    response_model=ApiResponse[None],
    responses={404: {"description": "Notification not found", "model": ErrorResponse}},
    summary="Delete a notification",
)
async def delete_notification(
    notification_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[None]:
    await notification_service.delete_notification(db, notification_id, user_id)
    return ApiResponse(message="Notification deleted")
