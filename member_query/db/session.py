"""Database session management for the member database."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import sqlalchemy.engine
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from member_query.db.models import Base

log = logging.getLogger(__name__)


def get_engine(db_path: Path | None, *, echo: bool = False) -> sqlalchemy.engine.Engine:
    """Create SQLAlchemy engine for the member database.

    Args:
        db_path: Path to the SQLite file, or None for an in-memory database.
        echo: Log every SQL statement through SQLAlchemy's logger.

    Returns:
        SQLAlchemy engine.
    """
    if db_path is None:
        return create_engine("sqlite:///:memory:", echo=echo)

    db_path = db_path.expanduser().resolve()
    # - timeout: wait up to 30s for locks
    # - check_same_thread: False for connection pooling
    return create_engine(
        f"sqlite:///{db_path}",
        echo=echo,
        connect_args={
            "timeout": 30,
            "check_same_thread": False,
        },
    )


def init_schema(engine: sqlalchemy.engine.Engine) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(engine)
    log.debug("Schema ensured on %s", engine.url)


@contextmanager
def get_session(db_path: Path | None, *, echo: bool = False) -> Generator[Session, None, None]:
    """Open a session on the member database.

    Creates the parent directory and tables on first use. Commits when the
    block exits cleanly, rolls back on any exception.

    Args:
        db_path: Path to the SQLite file, or None for an in-memory database.
        echo: Log SQL statements.

    Yields:
        SQLAlchemy Session.
    """
    if db_path is not None:
        db_path = db_path.expanduser()
        if not db_path.exists():
            db_path.parent.mkdir(parents=True, exist_ok=True)
            log.info("Creating member database: %s", db_path)

    engine = get_engine(db_path, echo=echo)
    init_schema(engine)

    session_factory = sessionmaker(bind=engine)
    session = session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()
