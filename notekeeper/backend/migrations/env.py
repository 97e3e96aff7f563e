"""
Alembic environment for the notekeeper schema.

The URL comes from DATABASE_URL when set, otherwise from
config/settings/database.yaml (plus DB_PASSWORD from config/.env).
SQLite runs in batch mode so ALTERs are emulated by table copies.
"""

import asyncio
import os
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

# Importing the package registers every model on Base.metadata
from notekeeper.backend.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    from notekeeper.backend.core.config import get_database_url as configured_url

    return configured_url()


def _configure_and_run(is_sqlite: bool, **options: Any) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=is_sqlite,
        **options,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Emit SQL instead of executing it (alembic upgrade head --sql)."""
    url = get_database_url()
    _configure_and_run(
        url.startswith("sqlite"),
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def do_run_migrations(connection: Connection) -> None:
    _configure_and_run(connection.dialect.name == "sqlite", connection=connection)


async def run_async_migrations() -> None:
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = async_engine_from_config(
        configuration,
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
