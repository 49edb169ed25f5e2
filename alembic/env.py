from __future__ import annotations
import os
import sys
from pathlib import Path
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy import create_engine
from alembic import context

# Migrations run from a checkout; make the loggen package importable
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Let migrations own the schema instead of db.create_all()
os.environ.setdefault("LOGGEN_AUTO_CREATE", "0")

from loggen import create_app  # noqa: E402
from loggen.models import db  # noqa: E402

config = context.config

# alembic.ini carries the migration log levels
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

app = create_app()

target_metadata = db.metadata

# DATABASE_URL wins over the sqlalchemy.url placeholder in alembic.ini
DB_URL = os.environ.get("DATABASE_URL") or app.config.get("SQLALCHEMY_DATABASE_URI")


def run_migrations_offline() -> None:
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(DB_URL, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            # SQLite needs batch mode for ALTER TABLE in later revisions
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
