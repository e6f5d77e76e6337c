"""Opening and checking the database connection."""

from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url

_DIALECTS = {
    "postgres": "postgresql",
    "postgresql": "postgresql",
    "pgx": "postgresql",
    "mysql": "mysql",
    "sqlite": "sqlite",
    "sqlite3": "sqlite",
}


class DatabaseError(Exception):
    """Raised when the database cannot be opened or reached."""


def _build_engine(driver: str, source: str) -> Engine:
    dialect = _DIALECTS.get(driver)
    if dialect is None:
        raise ValueError(f"unknown driver {driver!r}")

    if "://" in source:
        url = make_url(source)
        _, plus, dbapi = url.drivername.partition("+")
        return create_engine(url.set(drivername=dialect + plus + dbapi))

    if dialect == "sqlite":
        return create_engine(URL.create("sqlite", database=source))

    # Keyword/value connection strings go straight to the DB-API driver.
    return create_engine(f"{dialect}://", connect_args={"dsn": source})


def connect_db(driver: str, source: str) -> Engine:
    """Open a database engine and verify it answers a query."""
    try:
        engine = _build_engine(driver, source)
    except Exception as exc:
        raise DatabaseError(f"failed to connect to db: {exc}") from exc

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as exc:
        engine.dispose()
        raise DatabaseError(f"failed to ping db: {exc}") from exc

    return engine