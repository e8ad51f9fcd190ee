"""
TeenLife Hours Backend — Notification Feed Schemas
====================================================
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from teenlife.models.notification import Notification
from teenlife.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: uuid.UUID
    user_id: str
    title: str
    message: str
    type: str
    category: Optional[str] = None
    action_url: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_model(cls, notification: Notification) -> "NotificationResponse":
        # Built by hand: the ORM attribute is `notification_metadata`, and
        # `metadata` on a mapped instance is the table MetaData.
        return cls(
            id=notification.id,
            user_id=notification.user_id,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            category=notification.category,
            action_url=notification.action_url,
            metadata=notification.notification_metadata or {},
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )


class NotificationListResponse(CamelModel):
    notifications: List[NotificationResponse]
    total: int
    limit: int
    offset: int


class UnreadCountResponse(CamelModel):
    count: int


class MarkAllReadResponse(CamelModel):
    updated: int
