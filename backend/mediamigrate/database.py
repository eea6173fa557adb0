from pathlib import Path
from typing import Union
from urllib.parse import quote

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def create_library_engine(db_path: Union[str, Path], create: bool = False) -> Engine:
    """Create a read-write engine for the single-file library database.

    SQLite silently creates a missing file on connect, which would turn a
    misconfigured path into an empty library. Unless ``create`` is set the
    file must already exist.
    """
    db_path = Path(db_path)
    if not create and not db_path.is_file():
        raise FileNotFoundError(f"Library database '{db_path}' does not exist")

    if create:
        url = URL.create("sqlite", database=str(db_path))
    else:
        # mode=rw fails on a file removed after the check instead of recreating it
        url = URL.create(
            "sqlite",
            database=f"file:{quote(db_path.absolute().as_posix())}",
            query={"mode": "rw", "uri": "true"})
    return create_engine(url, echo=False)


def init_db(engine: Engine) -> None:
    """Create the library tables if they don't exist"""
    # Import models so every table is registered on Base.metadata
    from mediamigrate import models  # noqa: F401

    Base.metadata.create_all(engine)


def ensure_migrations_table(engine: Engine) -> None:
    """Create the table recording applied migration routines."""
    from mediamigrate.models import AppliedMigration

    AppliedMigration.__table__.create(engine, checkfirst=True)
