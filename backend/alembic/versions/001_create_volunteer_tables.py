"""Create volunteer_hours and notifications tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the hour record store and the notification feed.
How:   PostgreSQL types: UUID keys, TIMESTAMP WITH TIME ZONE, JSONB metadata.
       The unique index on verification_code is what makes code minting safe
       under concurrent inserts.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "volunteer_hours",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(64),
            nullable=False,
            comment="Owner of the entry (token subject)",
        ),
        sa.Column("organization", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("supervisor_name", sa.String(255), nullable=True),
        sa.Column("supervisor_email", sa.String(255), nullable=True),
        sa.Column("hours", sa.Float(), nullable=False),
        sa.Column(
            "date",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="When the volunteer service took place",
        ),
        sa.Column(
            "verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "verification_code",
            sa.String(64),
            nullable=False,
            comment="Capability token a supervisor presents to verify this entry",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint("hours > 0", name="ck_volunteer_hours_hours_positive"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_volunteer_hours_verification_code",
        "volunteer_hours",
        ["verification_code"],
        unique=True,
    )
    op.create_index(
        "idx_volunteer_hours_user_date",
        "volunteer_hours",
        ["user_id", sa.text("date DESC")],
    )
    op.create_index(
        "idx_volunteer_hours_user_verified",
        "volunteer_hours",
        ["user_id", "verified"],
    )

    op.create_table(
        "notifications",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("action_url", sa.String(255), nullable=True),
        sa.Column(
            "metadata",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "is_read",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("read_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "type IN ('schedule', 'volunteering', 'social', 'mental_health', 'achievement')",
            name="ck_notifications_type",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_notifications_user_created",
        "notifications",
        ["user_id", sa.text("created_at DESC")],
    )
    op.create_index(
        "idx_notifications_user_unread",
        "notifications",
        ["user_id", "is_read"],
    )


def downgrade() -> None:
    op.drop_index("idx_notifications_user_unread", table_name="notifications")
    op.drop_index("idx_notifications_user_created", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_volunteer_hours_user_verified", table_name="volunteer_hours")
    op.drop_index("idx_volunteer_hours_user_date", table_name="volunteer_hours")
    op.drop_index("uq_volunteer_hours_verification_code", table_name="volunteer_hours")
    op.drop_table("volunteer_hours")
