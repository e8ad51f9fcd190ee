"""
TeenLife Hours Backend — Notification Service Tests
=====================================================

What:  The emitter helpers and the per-user feed, against SQLite.

What we test:
    ✅ Helper titles, messages, categories and metadata
    ✅ Feed paging, filters and the total count
    ✅ Read state: one, all, unread count
    ✅ Every feed operation is scoped to its user
"""

from uuid import uuid4

import pytest

from teenlife.exceptions import NotFoundError
from teenlife.models.volunteer_hour import VolunteerHour
from teenlife.services.notification_service import NotificationService


def _hour_entry(service_date, hours=2.0) -> VolunteerHour:
    return VolunteerHour(
        id=uuid4(),
        user_id="u1",
        organization="Food Bank",
        description="Sorted donations",
        hours=hours,
        date=service_date,
        verified=False,
        verification_code="VH-TEST-AAAAA-AAAAA",
    )


class TestEmitterHelpers:

    def setup_method(self):
        self.service = NotificationService()

    @pytest.mark.asyncio
    async def test_hours_logged(self, db_session, service_date):
        entry = _hour_entry(service_date)

        notification = await self.service.hours_logged(db_session, entry)

        assert notification.title == "Volunteer Hours Logged"
        assert notification.message == "Your 2 hours at Food Bank have been logged"
        assert notification.type == "volunteering"
        assert notification.category == "hours_logged"
        assert notification.action_url == f"/volunteering/hours/{entry.id}"
        assert notification.notification_metadata == {"hoursId": str(entry.id)}
        assert notification.is_read is False

    @pytest.mark.asyncio
    async def test_hours_approved(self, db_session, service_date):
        entry = _hour_entry(service_date, hours=2.5)

        notification = await self.service.hours_approved(db_session, entry)

        assert notification.title == "Hours Approved! 🎉"
        assert notification.message == "Your 2.5 hours at Food Bank have been approved"
        assert notification.notification_metadata["hours"] == 2.5

    @pytest.mark.asyncio
    async def test_hours_rejected(self, db_session, service_date):
        notification = await self.service.hours_rejected(db_session, _hour_entry(service_date))

        assert notification.title == "Hours Rejected"
        assert notification.message == "Your hours at Food Bank need verification. Please update."

    @pytest.mark.asyncio
    async def test_milestone(self, db_session):
        notification = await self.service.milestone_reached(db_session, "u1", 50)

        assert notification.title == "Milestone Reached! 🏆"
        assert notification.message == "Congratulations! You've reached 50 volunteer hours!"
        assert notification.category == "milestone"
        assert notification.notification_metadata == {"milestone": 50}

    @pytest.mark.asyncio
    async def test_test_notification(self, db_session):
        notification = await self.service.create_test_notification(db_session, "u1")

        assert notification.type == "achievement"
        assert notification.category == "test"


class TestFeed:

    def setup_method(self):
        self.service = NotificationService()

    async def _seed(self, db, user_id, count, type_="volunteering"):
        for i in range(count):
            await self.service.emit(
                db, user_id, f"Title {i}", f"Message {i}", category="seed", type_=type_
            )

    @pytest.mark.asyncio
    async def test_list_paging_and_total(self, db_session):
        await self._seed(db_session, "u1", 5)
        await self._seed(db_session, "u2", 3)

        page, total = await self.service.list_notifications(db_session, "u1", limit=2, offset=0)
        rest, _ = await self.service.list_notifications(db_session, "u1", limit=10, offset=2)

        assert total == 5
        assert len(page) == 2
        assert len(rest) == 3
        assert {n.user_id for n in page + rest} == {"u1"}
        assert page[0].created_at >= page[1].created_at

    @pytest.mark.asyncio
    async def test_filters(self, db_session):
        await self._seed(db_session, "u1", 2)
        await self._seed(db_session, "u1", 1, type_="achievement")
        notifications, _ = await self.service.list_notifications(db_session, "u1")
        await self.service.mark_read(db_session, notifications[0].id, "u1")

        achievements, total = await self.service.list_notifications(
            db_session, "u1", type_="achievement"
        )
        assert total == 1
        assert achievements[0].type == "achievement"

        _, unread_total = await self.service.list_notifications(db_session, "u1", is_read=False)
        assert unread_total == 2

    @pytest.mark.asyncio
    async def test_mark_read_and_unread_count(self, db_session):
        await self._seed(db_session, "u1", 3)
        notifications, _ = await self.service.list_notifications(db_session, "u1")

        assert await self.service.unread_count(db_session, "u1") == 3
        await self.service.mark_read(db_session, notifications[0].id, "u1")
        assert await self.service.unread_count(db_session, "u1") == 2

    @pytest.mark.asyncio
    async def test_mark_all_read(self, db_session):
        await self._seed(db_session, "u1", 3)
        await self._seed(db_session, "u2", 1)

        assert await self.service.mark_all_read(db_session, "u1") == 3
        assert await self.service.unread_count(db_session, "u1") == 0
        assert await self.service.unread_count(db_session, "u2") == 1
        assert await self.service.mark_all_read(db_session, "u1") == 0

    @pytest.mark.asyncio
    async def test_other_users_notification_is_not_found(self, db_session):
        await self._seed(db_session, "u1", 1)
        notifications, _ = await self.service.list_notifications(db_session, "u1")
        target = notifications[0].id

        with pytest.raises(NotFoundError):
            await self.service.mark_read(db_session, target, "u2")
        with pytest.raises(NotFoundError):
            await self.service.delete_notification(db_session, target, "u2")

        assert await self.service.unread_count(db_session, "u1") == 1

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        await self._seed(db_session, "u1", 2)
        notifications, _ = await self.service.list_notifications(db_session, "u1")

        await self.service.delete_notification(db_session, notifications[0].id, "u1")

        _, total = await self.service.list_notifications(db_session, "u1")
        assert total == 1
