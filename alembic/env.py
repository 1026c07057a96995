import os
import sys

from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

from alembic import context

# Make the server modules importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import models  # noqa: E402,F401  (registers tables on Base.metadata)
from database import DATABASE_URL, Base  # noqa: E402

load_dotenv()

config = context.config
config.set_main_option("sqlalchemy.url", DATABASE_URL)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
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
