"""
TeenLife Hours Backend — Alembic Migration Environment
========================================================

What:  Runs the volunteer_hours and notifications migrations with the same
       async engine settings the API uses.
Why:   The schema carries constraints the services depend on (the unique
       verification-code index, the hours > 0 check, the notification type
       check); migrations are the only place they are created in production.
How:   Online runs open an async engine (asyncpg in production, aiosqlite
       locally) and hand a sync connection to Alembic via run_sync().
Who:   `alembic upgrade head` in deploy scripts and local setup.
"""

import asyncio
from logging.config import fileConfig
from typing import Any, Dict

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from teenlife.config import settings
from teenlife.database import Base

# Why: --autogenerate compares against Base.metadata, which only knows the
# tables whose model modules have been imported.
from teenlife.models.notification import Notification  # noqa: F401
from teenlife.models.volunteer_hour import VolunteerHour  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Why: the API and its migrations must target the same DATABASE_URL; the
# placeholder in alembic.ini is only a fallback for tooling.
config.set_main_option("sqlalchemy.url", settings.database_url)


def _migration_options(url: str) -> Dict[str, Any]:
    """
    context.configure() options shared by offline and online runs.

    compare_type: hours is a Float and metadata is JSONB on PostgreSQL; a type
                  drift there should show up in autogenerate diffs.
    render_as_batch: SQLite cannot ALTER constraints in place, so changes to
                  the check constraints are emitted as table copies.
    """
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout (e.g. for a DBA to review) without connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_migration_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        **_migration_options(str(connection.engine.url)),
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Apply pending revisions over a single async connection.

    Why NullPool: a migration run is one short-lived connection; pooling
    settings from teenlife.database (pool_size=20) would only hold it open.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
