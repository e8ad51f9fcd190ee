"""
TeenLife Hours Backend — VolunteerHour SQLAlchemy Model
=========================================================

What:  ORM model for the `volunteer_hours` table (the Hour Record Store).
Who:   Used by VolunteerService for CRUD and verification; by Alembic for schema.

Table Design:
    - UUID primary key
    - user_id: owner, copied from the token's `sub` claim; never updated
    - verification_code: minted once at insert, UNIQUE at the store level.
      Two concurrent inserts that happen to mint the same code cannot both
      commit; the loser retries with a new code.
    - verified: the only state in the lifecycle (unverified → verified and
      back, always externally triggered)
    - date: when the service happened, distinct from created_at

Indexes:
    uq_volunteer_hours_verification_code: capability lookup + uniqueness
    idx_volunteer_hours_user_date:        owner listing, newest service date first
    idx_volunteer_hours_user_verified:    approved-hours SUM per owner
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, Float, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from teenlife.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VolunteerHour(Base):
    """
    One claimed block of volunteer service.

    Lifecycle:
        1. Created by the owner (verified = False, code minted)
        2. Verified by the owner (PUT verified=true) or by a supervisor
           presenting the code (POST /api/volunteer/verify)
        3. Optionally un-verified by the owner (PUT verified=false)
        4. Deleted by the owner
    """

    __tablename__ = "volunteer_hours"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Owner of the entry (token subject)",
    )

    # ── Descriptive fields ────────────────────────────────────────────────
    organization: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    supervisor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    supervisor_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    hours: Mapped[float] = mapped_column(Float, nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the volunteer service took place",
    )

    # ── Verification ──────────────────────────────────────────────────────
    verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    verification_code: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Capability token a supervisor presents to verify this entry",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        CheckConstraint("hours > 0", name="ck_volunteer_hours_hours_positive"),
        Index("uq_volunteer_hours_verification_code", "verification_code", unique=True),
        Index("idx_volunteer_hours_user_date", "user_id", date.desc()),
        Index("idx_volunteer_hours_user_verified", "user_id", "verified"),
    )

    def __repr__(self) -> str:
        # The code is a capability; keep it out of reprs that end up in logs.
        return (
            f"<VolunteerHour(id={self.id}, user_id='{self.user_id}', "
            f"hours={self.hours}, verified={self.verified})>"
        )
