"""
TeenLife Hours Backend — Volunteer Service (Verification Workflow)
===================================================================

What:  Business logic for volunteer hour entries: create, read, update,
       delete, and the two verification paths.
Who:   Called by routes/volunteer.py; calls NotificationService and the
       recognition calculator.

Verification paths:
    ┌──────────────┐  PUT verified=true/false  ┌──────────────┐
    │  unverified  │ ◀───────────────────────▶ │   verified   │
    └──────────────┘                           └──────────────┘
           │     POST /verify {verificationCode}      ▲
           └──────────────────────────────────────────┘

    - Owner path (update_entry): authenticated, ownership checked, can move
      the flag either way.
    - Capability path (verify_by_code): no caller identity at all; holding
      the code is the authorization. Can only move the flag to verified.

Transition side effects:
    Both paths flip the flag with a conditional UPDATE
    (`... WHERE id = :id AND verified = :old`). Only the request whose UPDATE
    actually changed the row emits notifications and runs the milestone
    check; a concurrent or repeated verification sees rowcount 0 and is a
    silent no-op. The approved total is read in the same transaction right
    after the UPDATE, so the pre-transition total is `total - entry.hours`.

Verification codes:
    VH-<base36 ms timestamp>-<5 random>-<5 random>, random blocks from
    `secrets` over A-Z0-9 (~51 bits). Uniqueness is the database's job
    (unique index); a violation of that index rolls back the savepoint and
    tenacity retries with a fresh code. Any other IntegrityError is not retried.
"""

import logging
import math
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
)

from teenlife.config import settings
from teenlife.exceptions import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from teenlife.models.volunteer_hour import VolunteerHour
from teenlife.schemas.volunteer import HourEntryCreate, HourEntryUpdate
from teenlife.services.notification_service import notification_service
from teenlife.services.recognition import (
    DEFAULT_RECOGNITION_CONFIG,
    RecognitionConfig,
    check_milestone,
)

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_BASE36 = string.digits + string.ascii_uppercase
CODE_UNIQUE_INDEX = "uq_volunteer_hours_verification_code"

# Fields an owner may change through update_entry (besides `verified`)
_MUTABLE_FIELDS = (
    "organization",
    "description",
    "hours",
    "date",
    "location",
    "supervisor_name",
    "supervisor_email",
)


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_verification_code() -> str:
    """Mint a new, human-transcribable verification code."""
    stamp = _to_base36(time.time_ns() // 1_000_000)
    random_part = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(10))
    return f"VH-{stamp}-{random_part[:5]}-{random_part[5:]}"


def mask_code(code: str) -> str:
    """Loggable form of a verification code."""
    return f"{code[:6]}…" if len(code) > 6 else "…"


def _validate_fields(fields: Dict[str, Any], require_all: bool) -> Dict[str, Any]:
    """
    Apply the hour-entry business rules to `fields`.

    With require_all=False (updates) only the keys present are checked.
    Returns the cleaned values (trimmed text).
    """
    cleaned = dict(fields)

    for name in ("organization", "description"):
        if require_all or name in fields:
            value = fields.get(name)
            if value is None or not str(value).strip():
                raise ValidationError(message=f"{name} is required", field=name)
            cleaned[name] = str(value).strip()

    if require_all or "hours" in fields:
        hours = fields.get("hours")
        if hours is None:
            raise ValidationError(message="hours is required", field="hours")
        if not math.isfinite(hours) or hours <= 0:
            raise ValidationError(message="hours must be greater than 0", field="hours")

    if require_all or "date" in fields:
        if fields.get("date") is None:
            raise ValidationError(message="date is required", field="date")

    for name in ("location", "supervisor_name", "supervisor_email"):
        value = cleaned.get(name)
        if isinstance(value, str):
            cleaned[name] = value.strip() or None

    return cleaned


def _is_code_collision(exc: BaseException) -> bool:
    """True only for a duplicate verification_code; other integrity errors are not retried."""
    if not isinstance(exc, IntegrityError):
        return False
    constraint = getattr(exc.orig, "constraint_name", None)
    if constraint:
        return constraint == CODE_UNIQUE_INDEX
    # SQLite names the column instead: "UNIQUE constraint failed: volunteer_hours.verification_code"
    message = str(exc.orig)
    return CODE_UNIQUE_INDEX in message or "volunteer_hours.verification_code" in message


class VolunteerService:
    """
    Verification Workflow for volunteer hour entries.

    Owner-scoped operations take the caller's id and raise ForbiddenError on
    mismatch. verify_by_code is the only mutation without a caller.
    """

    def __init__(self, recognition_config: RecognitionConfig = DEFAULT_RECOGNITION_CONFIG):
        self.recognition_config = recognition_config

    # ── Create ────────────────────────────────────────────────────────────

    async def create_entry(
        self,
        db: AsyncSession,
        owner_id: str,
        data: HourEntryCreate,
    ) -> VolunteerHour:
        """
        Validate, mint a unique code, insert with verified=False, then emit
        an "hours logged" notification.

        Raises:
            ValidationError: a required field is missing/blank, or hours is not
                a finite number > 0
            DatabaseError: code collisions outlasted the retry budget, or the
                insert broke another constraint
        """
        fields = _validate_fields(data.model_dump(), require_all=True)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(settings.verification_code_max_attempts),
                retry=retry_if_exception(_is_code_collision),
                before_sleep=before_sleep_log(logger, logging.WARNING),
            ):
                with attempt:
                    entry = VolunteerHour(
                        user_id=owner_id,
                        verified=False,
                        verification_code=generate_verification_code(),
                        **fields,
                    )
                    async with db.begin_nested():
                        db.add(entry)
                        await db.flush()
        except RetryError as e:
            logger.error(
                "Could not mint a unique verification code for user %s after %d attempts",
                owner_id,
                settings.verification_code_max_attempts,
            )
            raise DatabaseError(
                message="Could not save the volunteer hours. Please try again.",
                context={"reason": "verification_code_collision"},
            ) from e
        except IntegrityError as e:
            logger.error("Volunteer entry insert for user %s failed: %s", owner_id, e.orig)
            raise DatabaseError(
                message="Could not save the volunteer hours. Please try again.",
                context={"reason": "integrity_error", "detail": str(e.orig)},
            ) from e

        logger.info(
            "Volunteer entry %s created for user %s (%.2fh, code %s)",
            entry.id,
            owner_id,
            entry.hours,
            mask_code(entry.verification_code),
        )

        await notification_service.hours_logged(db, entry)
        return entry

    # ── Read ──────────────────────────────────────────────────────────────

    async def _get_for_owner(self, db: AsyncSession, entry_id: UUID, caller_id: str) -> VolunteerHour:
        entry = await db.get(VolunteerHour, entry_id)
        if entry is None:
            raise NotFoundError(
                resource="volunteer hour entry",
                message="Volunteer hour entry not found",
                context={"entry_id": str(entry_id)},
            )
        if entry.user_id != caller_id:
            logger.warning("User %s attempted to access entry %s owned by another user", caller_id, entry_id)
            raise ForbiddenError()
        return entry

    async def get_entry(self, db: AsyncSession, entry_id: UUID, caller_id: str) -> VolunteerHour:
        return await self._get_for_owner(db, entry_id, caller_id)

    async def list_entries(
        self,
        db: AsyncSession,
        owner_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        organization: Optional[str] = None,
        verified: Optional[bool] = None,
    ) -> List[VolunteerHour]:
        """Owner's entries, most recent service date first."""
        query = select(VolunteerHour).where(VolunteerHour.user_id == owner_id)
        if start_date is not None:
            query = query.where(VolunteerHour.date >= start_date)
        if end_date is not None:
            query = query.where(VolunteerHour.date <= end_date)
        if organization:
            query = query.where(VolunteerHour.organization.icontains(organization, autoescape=True))
        if verified is not None:
            query = query.where(VolunteerHour.verified == verified)

        result = await db.execute(query.order_by(VolunteerHour.date.desc()))
        return list(result.scalars().all())

    async def compute_total(self, db: AsyncSession, owner_id: str) -> float:
        """Sum of hours over the owner's verified entries. Always read fresh."""
        result = await db.execute(
            select(func.coalesce(func.sum(VolunteerHour.hours), 0.0)).where(
                VolunteerHour.user_id == owner_id,
                VolunteerHour.verified.is_(True),
            )
        )
        return float(result.scalar() or 0.0)

    # ── Update / Delete ───────────────────────────────────────────────────

    async def update_entry(
        self,
        db: AsyncSession,
        entry_id: UUID,
        caller_id: str,
        data: HourEntryUpdate,
    ) -> VolunteerHour:
        """
        Apply an owner's partial update.

        Plain field changes never notify. A `verified` value that differs from
        the stored one goes through the conditional transition; see module
        docstring.

        Raises:
            NotFoundError, ForbiddenError, ValidationError
        """
        entry = await self._get_for_owner(db, entry_id, caller_id)

        changes = data.model_dump(exclude_unset=True)
        target_verified = changes.pop("verified", None)
        changes = _validate_fields(
            {k: v for k, v in changes.items() if k in _MUTABLE_FIELDS},
            require_all=False,
        )

        for name, value in changes.items():
            setattr(entry, name, value)
        if changes:
            await db.flush()

        if target_verified is None or target_verified == entry.verified:
            return entry

        transitioned = await self._transition(db, entry, verified=target_verified)
        if not transitioned:
            return entry

        if target_verified:
            await self._after_approval(db, entry)
        else:
            logger.info("Entry %s un-verified by owner %s", entry.id, caller_id)
            await notification_service.hours_rejected(db, entry)
        return entry

    async def delete_entry(self, db: AsyncSession, entry_id: UUID, caller_id: str) -> None:
        entry = await self._get_for_owner(db, entry_id, caller_id)
        await db.delete(entry)
        await db.flush()
        logger.info("Entry %s deleted by owner %s", entry_id, caller_id)

    # ── Capability path ───────────────────────────────────────────────────

    async def verify_by_code(self, db: AsyncSession, code: Optional[str]) -> VolunteerHour:
        """
        Mark the entry holding `code` as verified. No caller identity.

        Verifying an already verified entry succeeds and has no side effects.

        Raises:
            ValidationError: blank code
            NotFoundError: no entry has this code
        """
        code = (code or "").strip()
        if not code:
            raise ValidationError(message="Verification code is required", field="verificationCode")

        result = await db.execute(
            select(VolunteerHour).where(VolunteerHour.verification_code == code)
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            logger.info("Verification attempted with unknown code %s", mask_code(code))
            raise NotFoundError(resource="verification code", message="Verification code not found")

        if await self._transition(db, entry, verified=True):
            logger.info("Entry %s verified by code", entry.id)
            await self._after_approval(db, entry)
        else:
            logger.info("Entry %s was already verified; code verification is a no-op", entry.id)
        return entry

    # ── Internals ─────────────────────────────────────────────────────────

    async def _transition(self, db: AsyncSession, entry: VolunteerHour, verified: bool) -> bool:
        """
        Conditionally flip `verified`. True only if this call changed the row.
        """
        result = await db.execute(
            update(VolunteerHour)
            .where(VolunteerHour.id == entry.id, VolunteerHour.verified == (not verified))
            .values(verified=verified, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        await db.refresh(entry)
        return result.rowcount == 1

    async def _after_approval(self, db: AsyncSession, entry: VolunteerHour) -> None:
        """Approved notification, then the milestone check on the fresh total."""
        await notification_service.hours_approved(db, entry)

        new_total = await self.compute_total(db, entry.user_id)
        old_total = new_total - entry.hours
        milestone = check_milestone(old_total, new_total, self.recognition_config)
        if milestone is not None:
            logger.info(
                "User %s crossed the %gh milestone (%.2f → %.2f)",
                entry.user_id,
                milestone,
                old_total,
                new_total,
            )
            await notification_service.milestone_reached(db, entry.user_id, milestone)


# ── Singleton Instance ────────────────────────────────────────────────────
volunteer_service = VolunteerService()
