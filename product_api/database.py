# product_api/database.py
from __future__ import annotations

import os
import re
from contextlib import contextmanager
from typing import Generator, Optional

from dotenv import load_dotenv
from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

# Load .env on the host; in containers the values come from the environment.
load_dotenv()

# -----------------------------
# Helpers
# -----------------------------
def _env_bool(key: str, default: bool = False) -> bool:
    val = os.getenv(key)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}

def _mask_url(url: str) -> str:
    if "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    if "@" not in rest or ":" not in rest.split("@", 1)[0]:
        return url
    creds, tail = rest.split("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{tail}"

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")

# -----------------------------
# Config from environment
# -----------------------------
DATABASE_URL = (os.getenv("DATABASE_URL", "sqlite:///./products.db") or "").strip()
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is empty. Set a valid SQLAlchemy URL.")

# SQLite has no schemas; DB_SCHEMA only applies to server databases.
_raw_schema = (os.getenv("DB_SCHEMA") or "").strip()
DEFAULT_SCHEMA: Optional[str] = None
if _raw_schema and not _is_sqlite(DATABASE_URL) and _IDENT_RE.fullmatch(_raw_schema):
    DEFAULT_SCHEMA = _raw_schema

ECHO_SQL = _env_bool("DB_ECHO", False)

POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "1800"))  # sec
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))    # sec

# -----------------------------
# Naming convention for Alembic/op.f()
# -----------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(schema=DEFAULT_SCHEMA, naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)

# -----------------------------
# Engine factory
# -----------------------------
def _build_engine_kwargs(url: str, echo: bool) -> dict:
    kwargs: dict = {"echo": echo, "pool_pre_ping": True}

    if _is_sqlite(url):
        # SQLite driver is single-thread by default; requests run in a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory -> StaticPool (otherwise every connection sees its own DB)
        if url in {"sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = NullPool
    else:
        kwargs.update(
            {
                "pool_size": POOL_SIZE,
                "max_overflow": MAX_OVERFLOW,
                "pool_recycle": POOL_RECYCLE,
                "pool_timeout": POOL_TIMEOUT,
            }
        )
        if DEFAULT_SCHEMA:
            # search_path through libpq options, not as a statement
            kwargs["connect_args"] = {"options": f"-c search_path={DEFAULT_SCHEMA},public"}

    return kwargs

def build_engine(url: Optional[str] = None, *, echo: Optional[bool] = None) -> Engine:
    url = url or DATABASE_URL
    return create_engine(url, **_build_engine_kwargs(url, ECHO_SQL if echo is None else echo))

def build_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False keeps returned objects readable after the session closes
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

engine: Engine = build_engine()
SessionLocal = build_session_factory(engine)

@contextmanager
def session_scope(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    Unit of work: commit on success, rollback on any error, always close.

        with session_scope() as db:
            db.add(obj)
    """
    db: Session = (factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def init_db(bind: Optional[Engine] = None) -> None:
    """Create the tables known to the models (dev/test; production uses Alembic)."""
    from product_api.models import product  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)

def init_db_if_requested(bind: Optional[Engine] = None) -> bool:
    """Runs init_db() when SQLALCHEMY_CREATE_ALL=1."""
    if _env_bool("SQLALCHEMY_CREATE_ALL", False):
        init_db(bind)
        return True
    return False

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "build_engine",
    "build_session_factory",
    "session_scope",
    "init_db",
    "init_db_if_requested",
]
