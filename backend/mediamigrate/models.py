from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime

from mediamigrate.database import Base


class TypedBaseItem(Base):
    """A media record in the library item table.

    Only the columns the migration routines touch are mapped; the live table
    carries many more.
    """
    __tablename__ = "TypedBaseItems"

    guid = Column(String(36), primary_key=True)
    type = Column(Text)
    Name = Column(Text)

    # Free-text parental rating label, e.g. PG-13, TV-MA
    OfficialRating = Column(Text, index=True)
    # Numeric parental-control level derived from OfficialRating
    InheritedParentalRatingValue = Column(Integer)


class AppliedMigration(Base):
    __tablename__ = "migrations"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    applied_at = Column(DateTime, default=datetime.utcnow)
