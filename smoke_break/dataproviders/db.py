"""Database configuration and session management for SmokeBreak."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

# ---------------------------------------------------------------------------
# Constants & Helpers
# ---------------------------------------------------------------------------
DB_FILENAME = os.getenv("SB_DB_FILENAME", "smoke_break.db")
DB_PATH = Path(DB_FILENAME).expanduser().absolute()

SQLALCHEMY_DATABASE_URL = f"sqlite:///{DB_PATH}"


class Base(DeclarativeBase):
    """Base class for declarative models."""


def make_engine(url: str = SQLALCHEMY_DATABASE_URL) -> Engine:
    # needed for SQLite when the scheduler touches the db outside the main thread
    return create_engine(url, echo=False, future=True, connect_args={"check_same_thread": False})


def make_session_factory(bind: Engine) -> scoped_session:
    return scoped_session(sessionmaker(bind=bind, autocommit=False, autoflush=False))


def init_db(bind: Engine) -> None:
    """Create tables that do not exist yet."""
    # models must be imported for their tables to be registered on Base
    from smoke_break.dataproviders.repositories import _models  # noqa: F401

    Base.metadata.create_all(bind=bind)


engine = make_engine()
SessionLocal = make_session_factory(engine)


@contextmanager
def session_scope(factory: scoped_session | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
