import os
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

# Safety check: Prevent accidental production database usage in tests
if os.getenv("TESTING") == "true" and not settings.DATABASE_URL.startswith("sqlite"):
    import warnings
    warnings.warn(
        f"WARNING: Tests are configured but DATABASE_URL points to non-SQLite: {settings.DATABASE_URL[:50]}...\n"
        "Set DATABASE_URL=sqlite:///:memory: before importing app modules.",
        RuntimeWarning,
        stacklevel=2
    )

# SQLite needs check_same_thread, other backends don't
if settings.DATABASE_URL.startswith("sqlite"):
    from sqlalchemy.pool import NullPool
    engine_kwargs = {
        "connect_args": {"check_same_thread": False},
        "poolclass": NullPool,
        "echo": False,
    }
else:
    engine_kwargs = {
        "connect_args": {"connect_timeout": 10},
        "pool_size": 20,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_timeout": 30,
        "echo": False,
    }


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # ON DELETE CASCADE is a no-op in SQLite unless enabled per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(settings.DATABASE_URL, **engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
