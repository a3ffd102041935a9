"""Alembic environment for the customer service.

The URL comes from sqlalchemy.url when a caller sets it (scripts/release.py,
scripts/migrate.py, tests); otherwise from DB_CONNECTION_URL / DATABASE_URL.
"""

from __future__ import annotations

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from app.crm.config import load_settings
from app.crm.models import Base

config = context.config

if not config.get_main_option("sqlalchemy.url"):
    database_url = load_settings().database_url
    if not database_url:
        raise RuntimeError("DB_CONNECTION_URL (or DATABASE_URL) env variable does not exist")
    config.set_main_option("sqlalchemy.url", database_url)

# Keep loggers created by the app (and pytest's capture) alive.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (SQL script output only)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (live database connection)."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
