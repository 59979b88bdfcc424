import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# --- Alembic Autogenerate Setup ---
import sys
from pathlib import Path
from dotenv import load_dotenv

# Project root holds the .env file (env.py is in backend/alembic)
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DOTENV_PATH = PROJECT_ROOT / '.env'

if DOTENV_PATH.exists():
    load_dotenv(dotenv_path=DOTENV_PATH)

# Make the 'fundable' package importable when alembic runs from backend/
sys.path.insert(0, str(PROJECT_ROOT / 'backend'))

# These imports MUST come *after* load_dotenv()
from fundable.db.base_class import Base
from fundable.domains.companies.models import Company, IncomeRecord  # noqa: F401
from fundable.config import settings

target_metadata = Base.metadata
# ----------------------------------


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Configures the context with just a URL, so the migration SQL is emitted
    as script output without needing a DBAPI.
    """
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    # SQLite needs batch mode for ALTER TABLE
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        {"sqlalchemy.url": settings.database_url},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
