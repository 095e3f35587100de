"""
SQLAlchemy engine construction.

The application engine is created once at import from DATABASE_URL and handed
to services through dependency injection. Server databases get a connection
pool sized for concurrent web requests; SQLite (local development and tests)
uses SQLAlchemy's defaults.
"""

from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url

from weather_booking.config import DATABASE_URL


def create_db_engine(url: str) -> Engine:
    """
    Create an engine for the given database URL.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    options: dict[str, Any] = {"future": True, "echo": False}

    if make_url(url).get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=10,  # Connections kept in the pool
            max_overflow=20,  # Extra connections when the pool is exhausted
            pool_pre_ping=True,  # Detect stale connections before use
            pool_recycle=3600,
        )

    return create_engine(url, **options)


engine: Engine = create_db_engine(DATABASE_URL)


def check_engine_health(db_engine: Optional[Engine] = None) -> bool:
    """
    Check if the database is reachable.

    Used by the /ready endpoint before the service accepts traffic.

    Args:
        db_engine: Engine to check (defaults to the application engine)

    Returns:
        bool: True if ``SELECT 1`` succeeds, False otherwise
    """
    try:
        with (db_engine or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
