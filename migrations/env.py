"""
Alembic environment configuration.
Reads DATABASE_URL from the application settings unless the Alembic config
already carries a sqlalchemy.url (tests and one-off upgrades set it directly).
"""

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from pokerboard.core.config import settings
from pokerboard.core.database import Base, build_database_url
from pokerboard.models import leaderboard, player, session  # noqa: F401

alembic_config = context.config

if not alembic_config.get_main_option("sqlalchemy.url"):
    alembic_config.set_main_option(
        "sqlalchemy.url",
        build_database_url(settings.DATABASE_URL, settings.DATABASE_NAME),
    )

# Keep application loggers alive when migrations run in-process
if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL scripts without connecting ('offline' mode)."""
    url = alembic_config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        alembic_config.get_section(alembic_config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
