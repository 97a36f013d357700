from __future__ import annotations

from logging.config import fileConfig

from alembic import context

from spending_insights.core.config import settings
from spending_insights.core.database import Base, create_db_engine, is_sqlite
from spending_insights import models  # noqa: F401 - registers tables on Base.metadata


config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# INSIGHTS_DATABASE_URL wins over alembic.ini
database_url = settings.DATABASE_URL
config.set_main_option("sqlalchemy.url", database_url)

target_metadata = Base.metadata


def _context_options() -> dict:
    # SQLite cannot ALTER most constraints in place; batch mode recreates the table
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": is_sqlite(database_url),
    }


def run_migrations_offline() -> None:
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_db_engine(database_url)
    try:
        with connectable.connect() as connection:
            context.configure(connection=connection, **_context_options())
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
