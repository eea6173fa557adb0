"""
Migration runner - applies pending routines once and records them in the
``migrations`` table so they are not re-applied.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from mediamigrate.database import ensure_migrations_table
from mediamigrate.migrations.base import MigrationRoutine
from mediamigrate.models import AppliedMigration

logger = logging.getLogger(__name__)


class MigrationRunner:
    """Runs routines in the order given against one library database."""

    def __init__(self, engine: Engine, routines: Iterable[MigrationRoutine]):
        self.engine = engine
        self.routines = list(routines)
        self.Session = sessionmaker(bind=engine)

    def applied_ids(self) -> set[str]:
        ensure_migrations_table(self.engine)
        with self.Session() as session:
            return set(session.scalars(select(AppliedMigration.id)))

    def _record(self, routine: MigrationRoutine) -> None:
        with self.Session() as session:
            session.add(AppliedMigration(id=str(routine.id), name=routine.name))
            session.commit()

    def run(self, is_new_install: bool = False) -> list[str]:
        """Apply every pending routine and return the names of those performed.

        On a new install, routines that only fix up legacy data are recorded
        as applied without running. A failing routine is not recorded and its
        error propagates, stopping the remaining routines.
        """
        applied = self.applied_ids()
        performed: list[str] = []

        for routine in self.routines:
            if str(routine.id) in applied:
                logger.debug(f"Skipping migration '{routine.name}' since it is already applied")
                continue

            if is_new_install and not routine.perform_on_new_install:
                logger.info(f"Skipping migration '{routine.name}' on new install")
                self._record(routine)
                applied.add(str(routine.id))
                continue

            logger.info(f"Applying migration '{routine.name}'")
            try:
                routine.perform()
            except Exception:
                logger.error(f"Could not apply migration '{routine.name}'")
                raise

            self._record(routine)
            applied.add(str(routine.id))
            performed.append(routine.name)
            logger.info(f"Migration '{routine.name}' applied successfully")

        return performed
