# migrations/env.py
from __future__ import annotations

import logging
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

# ------------------------------------------------------------
# Alembic config & logging
# ------------------------------------------------------------
config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)
log = logging.getLogger("alembic.env")

# product_api.database loads .env and builds metadata with the configured schema
from product_api.database import DATABASE_URL, DEFAULT_SCHEMA, Base  # noqa: E402
from product_api.models import product  # noqa: E402,F401

target_metadata = Base.metadata

VERSION_TABLE = os.getenv("ALEMBIC_VERSION_TABLE", "alembic_version")


def _mask_url(url: str) -> str:
    try:
        u = make_url(url)
        if u.password:
            u = u.set(password="***")
        return str(u)
    except Exception:
        return url


def _url() -> str:
    return os.getenv("DATABASE_URL") or DATABASE_URL


def run_migrations_offline() -> None:
    context.configure(
        url=_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table=VERSION_TABLE,
        version_table_schema=DEFAULT_SCHEMA,
        include_schemas=DEFAULT_SCHEMA is not None,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = _url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    log.info("Running migrations against %s", _mask_url(section["sqlalchemy.url"]))

    with connectable.connect() as connection:
        if DEFAULT_SCHEMA and connection.dialect.name == "postgresql":
            connection.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{DEFAULT_SCHEMA}"')
            connection.commit()
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            version_table=VERSION_TABLE,
            version_table_schema=DEFAULT_SCHEMA,
            include_schemas=DEFAULT_SCHEMA is not None,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
