import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from mediamigrate.database import create_library_engine, init_db
from mediamigrate.models import TypedBaseItem
from mediamigrate.services.ratings import MappingRatingResolver


@pytest.fixture
def library_db(tmp_path):
    """Path to a throwaway library database with the item table created."""
    db_file = tmp_path / "library.db"
    engine = create_library_engine(db_file, create=True)
    init_db(engine)
    engine.dispose()
    return db_file


@pytest.fixture
def add_items(library_db):
    """Insert one item per rating label; returns the generated guids in order."""
    def _add(*ratings, level=99):
        engine = create_library_engine(library_db)
        Session = sessionmaker(bind=engine)
        guids = []
        with Session() as session:
            for rating in ratings:
                guid = str(uuid.uuid4())
                session.add(TypedBaseItem(
                    guid=guid,
                    type='MediaBrowser.Controller.Entities.Movies.Movie',
                    Name=f'Movie {len(guids) + 1}',
                    OfficialRating=rating,
                    InheritedParentalRatingValue=level))
                guids.append(guid)
            session.commit()
        engine.dispose()
        return guids
    return _add


@pytest.fixture
def read_levels(library_db):
    """Map guid -> InheritedParentalRatingValue for every item."""
    def _read():
        engine = create_library_engine(library_db)
        with engine.connect() as conn:
            rows = conn.execute(select(TypedBaseItem.guid, TypedBaseItem.InheritedParentalRatingValue)).all()
        engine.dispose()
        return {guid: level for guid, level in rows}
    return _read


@pytest.fixture
def resolver():
    return MappingRatingResolver({'G': 0, 'PG': 10, 'PG-13': 13, 'R': 17, 'TV-MA': 17})
