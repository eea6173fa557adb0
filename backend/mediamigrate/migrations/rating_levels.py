"""
Recompute InheritedParentalRatingValue from OfficialRating for every library item.

The library database is backed up before any row is touched. Each distinct
rating label is then resolved once and written to every row carrying it.
"""
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from sqlalchemy import text

from mediamigrate.database import create_library_engine
from mediamigrate.migrations.base import MigrationRoutine
from mediamigrate.services.backup import BackupManager
from mediamigrate.services.events import (
    EventListener,
    LabelProcessed,
    MigrationCompleted,
    MigrationFailed,
    resolve_listener,
)
from mediamigrate.services.ratings import RatingResolver

SELECT_DISTINCT_RATINGS = text("SELECT DISTINCT OfficialRating FROM TypedBaseItems")
CLEAR_UNRATED = text(
    "UPDATE TypedBaseItems SET InheritedParentalRatingValue = NULL "
    "WHERE OfficialRating IS NULL OR OfficialRating = ''")
SET_LEVEL_FOR_RATING = text(
    "UPDATE TypedBaseItems SET InheritedParentalRatingValue = :value "
    "WHERE OfficialRating = :rating")


@dataclass
class MigrationSummary:
    """Outcome of a completed rating level migration"""
    backup_path: Path
    labels_processed: int = 0
    rows_affected: int = 0


class MigrateRatingLevels(MigrationRoutine):
    """Migrate rating levels to the numeric rating level system."""

    id = uuid.UUID('67445d54-b895-4b24-9f4c-35ce0690ea07')
    name = 'MigrateRatingLevels'
    # A fresh library has no legacy rating levels to recompute
    perform_on_new_install = False

    def __init__(
            self,
            db_path: Union[str, Path],
            resolver: RatingResolver,
            backup_manager: Optional[BackupManager] = None,
            listener: Optional[EventListener] = None):
        self.db_path = Path(db_path)
        self.resolver = resolver
        self.listener = resolve_listener(listener)
        self.backup_manager = backup_manager or BackupManager(listener=self.listener)

    def perform(self) -> MigrationSummary:
        # Raises before anything is opened for writing
        backup_path = self.backup_manager.create_backup(self.db_path)

        summary = MigrationSummary(backup_path=backup_path)
        try:
            engine = create_library_engine(self.db_path)
            try:
                with engine.connect() as conn:
                    self._migrate(conn, summary)
            finally:
                engine.dispose()
        except Exception as e:
            self.listener(MigrationFailed(self.name, e))
            raise

        self.listener(MigrationCompleted(self.name, summary.labels_processed, summary.rows_affected))
        return summary

    def _migrate(self, conn, summary: MigrationSummary) -> None:
        # Snapshot the labels first; rows added while updating are not covered
        with conn.begin():
            ratings = [row[0] for row in conn.execute(SELECT_DISTINCT_RATINGS)]

        cleared_unrated = False
        for rating in ratings:
            # Each label commits on its own; a failure leaves earlier labels migrated
            if rating is None or rating == '':
                if cleared_unrated:
                    # NULL and '' share one update
                    continue
                with conn.begin():
                    rows = conn.execute(CLEAR_UNRATED).rowcount
                cleared_unrated = True
                self._record(summary, LabelProcessed(None, None, rows))
            else:
                level = self.resolver.get_level(str(rating))
                with conn.begin():
                    rows = conn.execute(
                        SET_LEVEL_FOR_RATING, {'value': level, 'rating': rating}).rowcount
                self._record(summary, LabelProcessed(rating, level, rows))

    def _record(self, summary: MigrationSummary, event: LabelProcessed) -> None:
        summary.labels_processed += 1
        summary.rows_affected += event.rows_affected
        self.listener(event)
