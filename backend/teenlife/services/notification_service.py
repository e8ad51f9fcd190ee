"""
TeenLife Hours Backend — Notification Service
===============================================

What:  Writes notification records (the Notification Emitter) and serves the
       per-user notification feed.
Who:   VolunteerService emits through the helpers below; the notification
       routes call the feed methods.

Emission contract:
    emit() never raises. The insert runs inside a SAVEPOINT of the caller's
    session; if it fails, only the savepoint is rolled back, the failure is
    logged, and None is returned. The hour-entry write that triggered the
    notification commits regardless.

Feed:
    Notifications are polled by the client (no push). Listing is newest first
    with limit/offset paging; every feed operation is scoped by user_id.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teenlife.exceptions import NotFoundError
from teenlife.models.notification import Notification
from teenlife.models.volunteer_hour import VolunteerHour

logger = logging.getLogger(__name__)


def _format_hours(hours: float) -> str:
    """2.0 -> '2', 2.5 -> '2.5'"""
    return f"{hours:g}"


class NotificationService:
    """
    Notification emitter and feed.

    Stateless: every method receives the request's AsyncSession.
    """

    # ── Emitter ───────────────────────────────────────────────────────────

    async def emit(
        self,
        db: AsyncSession,
        user_id: str,
        title: str,
        message: str,
        category: str,
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        type_: str = "volunteering",
    ) -> Optional[Notification]:
        """
        Best-effort insert of one notification. Returns None on failure.
        """
        try:
            async with db.begin_nested():
                notification = Notification(
                    user_id=user_id,
                    title=title,
                    message=message,
                    type=type_,
                    category=category,
                    action_url=action_url,
                    notification_metadata=metadata or {},
                    is_read=False,
                    created_at=datetime.now(timezone.utc),
                )
                db.add(notification)
                await db.flush()
        except Exception:
            logger.warning(
                "Failed to create '%s' notification for user %s",
                category,
                user_id,
                exc_info=True,
            )
            return None

        logger.debug("Notification %s (%s) created for user %s", notification.id, category, user_id)
        return notification

    async def hours_logged(self, db: AsyncSession, entry: VolunteerHour) -> Optional[Notification]:
        return await self.emit(
            db,
            user_id=entry.user_id,
            title="Volunteer Hours Logged",
            message=(
                f"Your {_format_hours(entry.hours)} hours at {entry.organization} have been logged"
            ),
            category="hours_logged",
            action_url=f"/volunteering/hours/{entry.id}",
            metadata={"hoursId": str(entry.id)},
        )

    async def hours_approved(self, db: AsyncSession, entry: VolunteerHour) -> Optional[Notification]:
        return await self.emit(
            db,
            user_id=entry.user_id,
            title="Hours Approved! 🎉",
            message=(
                f"Your {_format_hours(entry.hours)} hours at {entry.organization} have been approved"
            ),
            category="hours_approved",
            action_url=f"/volunteering/hours/{entry.id}",
            metadata={
                "hoursId": str(entry.id),
                "organization": entry.organization,
                "hours": entry.hours,
            },
        )

    async def hours_rejected(self, db: AsyncSession, entry: VolunteerHour) -> Optional[Notification]:
        return await self.emit(
            db,
            user_id=entry.user_id,
            title="Hours Rejected",
            message=f"Your hours at {entry.organization} need verification. Please update.",
            category="hours_rejected",
            action_url=f"/volunteering/hours/{entry.id}",
            metadata={"hoursId": str(entry.id), "organization": entry.organization},
        )

    async def milestone_reached(
        self, db: AsyncSession, user_id: str, milestone: float
    ) -> Optional[Notification]:
        return await self.emit(
            db,
            user_id=user_id,
            title="Milestone Reached! 🏆",
            message=(
                f"Congratulations! You've reached {_format_hours(milestone)} volunteer hours!"
            ),
            category="milestone",
            action_url="/volunteering",
            metadata={"milestone": milestone},
        )

    async def create_test_notification(self, db: AsyncSession, user_id: str) -> Optional[Notification]:
        """Development helper behind POST /api/notifications/test."""
        return await self.emit(
            db,
            user_id=user_id,
            title="Test Notification",
            message="This is a test notification to verify the notification system is working!",
            category="test",
            action_url="/profile",
            metadata={"test": True},
            type_="achievement",
        )

    # ── Feed ──────────────────────────────────────────────────────────────

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        is_read: Optional[bool] = None,
        type_: Optional[str] = None,
    ) -> Tuple[List[Notification], int]:
        """
        One page of the user's notifications, newest first, plus the total
        matching the same filters.
        """
        conditions = [Notification.user_id == user_id]
        if is_read is not None:
            conditions.append(Notification.is_read == is_read)
        if type_:
            conditions.append(Notification.type == type_)

        result = await db.execute(
            select(Notification)
            .where(*conditions)
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        notifications = list(result.scalars().all())

        count_result = await db.execute(
            select(func.count(Notification.id)).where(*conditions)
        )
        total = count_result.scalar() or 0
        return notifications, total

    async def unread_count(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return result.scalar() or 0

    async def mark_read(self, db: AsyncSession, notification_id: UUID, user_id: str) -> None:
        result = await db.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(resource="notification", message="Notification not found")

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_notification(self, db: AsyncSession, notification_id: UUID, user_id: str) -> None:
        result = await db.execute(
            delete(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(resource="notification", message="Notification not found")


# ── Singleton Instance ────────────────────────────────────────────────────
notification_service = NotificationService()
