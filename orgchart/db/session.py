"""
Database session management
"""
import math
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from orgchart.core.config import settings
from orgchart.db.base import Base


def engine_options(database_url: str, io_timeout_seconds: float) -> Dict[str, Any]:
    """
    Keyword arguments for create_engine with the I/O timeout applied

    SQLite waits on locks for the timeout. PostgreSQL bounds connecting,
    each statement and the wait for a pooled connection.
    """
    options: Dict[str, Any] = {"pool_pre_ping": True, "echo": False}
    if "sqlite" in database_url:
        options["connect_args"] = {"check_same_thread": False, "timeout": io_timeout_seconds}
    else:
        options["pool_timeout"] = io_timeout_seconds
        options["connect_args"] = {
            # libpq only takes whole seconds
            "connect_timeout": max(1, math.ceil(io_timeout_seconds)),
            "options": f"-c statement_timeout={int(io_timeout_seconds * 1000)}",
        }
    return options


engine = create_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL, settings.IO_TIMEOUT_SECONDS))

# Create all tables automatically on startup for SQLite
if "sqlite" in settings.DATABASE_URL:
    import orgchart.models  # noqa: F401
    Base.metadata.create_all(bind=engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
