import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from mediamigrate.database import create_library_engine, init_db


def test_missing_file_is_refused(tmp_path):
    with pytest.raises(FileNotFoundError):
        create_library_engine(tmp_path / "library.db")
    assert not (tmp_path / "library.db").exists()


def test_file_removed_after_check_is_not_recreated(library_db):
    engine = create_library_engine(library_db)
    library_db.unlink()

    with pytest.raises(OperationalError):
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    engine.dispose()
    assert not library_db.exists()


def test_existing_file_opens_read_write(tmp_path):
    db_dir = tmp_path / "my library #1"
    db_dir.mkdir()
    db_file = db_dir / "library.db"
    setup_engine = create_library_engine(db_file, create=True)
    init_db(setup_engine)
    setup_engine.dispose()

    engine = create_library_engine(db_file)
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO TypedBaseItems (guid, OfficialRating) VALUES ('a', 'PG')"))
    with engine.connect() as conn:
        assert conn.execute(text("SELECT OfficialRating FROM TypedBaseItems")).scalar_one() == 'PG'
    engine.dispose()
