"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from member_query.db.models import Base
from member_query.db.repository import seed_sample_data

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlalchemy.orm import Session


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[database]
path = "{temp_dir / 'members.db'}"

[display]
colored_output = false

[search]
page_size = 2
page_strategy = "complex"
strict_bounds = true
""")
    return config_path


@pytest.fixture
def empty_session() -> Generator[Session, None, None]:
    """In-memory database with the schema but no rows."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def session(empty_session: Session) -> Session:
    """In-memory database seeded with the sample data.

    teamA: member1 (10), member2 (20)
    teamB: member3 (30), member4 (40)
    """
    seed_sample_data(empty_session)
    empty_session.commit()
    return empty_session
