from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, declared_attr, sessionmaker

from .config import settings


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        return cls.__name__.lower()


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def create_db_engine(url: str) -> Engine:
    """Engine for ``url``; SQLite connections get foreign keys, WAL and a Unicode ``lower()``."""
    sqlite = is_sqlite(url)
    eng = create_engine(url, connect_args={"check_same_thread": False} if sqlite else {})
    if sqlite:
        # WAL lets the dashboard worker sessions read while another connection is open
        @event.listens_for(eng, "connect")
        def _sqlite_pragma(dbapi_connection, connection_record):  # type: ignore[override]
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()
            # built-in lower() only folds ASCII; category filters need full Unicode
            dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return eng


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def worker_session(db: Session) -> Iterator[Session]:
    """Fresh session on the same bind as ``db`` for use in another thread.

    Sessions are not thread safe, so concurrent readers each open their own.
    """
    factory = sessionmaker(bind=db.get_bind(), autocommit=False, autoflush=False)
    with factory() as session:
        yield session
