from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cloudbill.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_ledger_engine(dsn: str, **kwargs: Any) -> Engine:
    """Create an engine for the billing ledger.

    SQLite connections get foreign key enforcement switched on, so line items
    and tax rows can never point at a missing invoice.
    """
    if not dsn.startswith("sqlite"):
        return create_engine(dsn, **kwargs)

    kwargs.setdefault("connect_args", {"check_same_thread": False})
    sqlite_engine = create_engine(dsn, **kwargs)
    event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
    return sqlite_engine


engine = create_ledger_engine(settings.APP_DATABASE_DSN)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create every billing ledger and resource snapshot table."""
    import cloudbill.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
