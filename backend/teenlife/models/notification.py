"""
TeenLife Hours Backend — Notification SQLAlchemy Model
========================================================

What:  ORM model for the `notifications` table (the in-app notification feed).
Who:   Written by NotificationService.emit(); read by the notification routes.

There is no foreign key to volunteer_hours: a notification
outlives the entry that triggered it (deleting an entry keeps its history
in the feed). The triggering entry id travels in `metadata` instead.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from teenlife.database import Base


# Notification families shown as filter chips in the mobile client.
NOTIFICATION_TYPES = ("schedule", "volunteering", "social", "mental_health", "achievement")


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    action_url: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # `metadata` is reserved on declarative classes, hence the attribute name.
    notification_metadata: Mapped[Dict[str, Any]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(
            "type IN (" + ", ".join(f"'{t}'" for t in NOTIFICATION_TYPES) + ")",
            name="ck_notifications_type",
        ),
        Index("idx_notifications_user_created", "user_id", created_at.desc()),
        Index("idx_notifications_user_unread", "user_id", "is_read"),
    )

    def __repr__(self) -> str:
        return (
            f"<Notification(id={self.id}, user_id='{self.user_id}', "
            f"category='{self.category}', is_read={self.is_read})>"
        )
