import uuid

import pytest
from sqlalchemy import select

from mediamigrate.database import create_library_engine
from mediamigrate.migrations import MigrateRatingLevels, MigrationRoutine, MigrationRunner
from mediamigrate.models import AppliedMigration


class RecordingRoutine(MigrationRoutine):
    def __init__(self, name, perform_on_new_install=True, fail=False):
        self.id = uuid.uuid5(uuid.NAMESPACE_URL, name)
        self.name = name
        self.perform_on_new_install = perform_on_new_install
        self.fail = fail
        self.calls = 0

    def perform(self):
        self.calls += 1
        if self.fail:
            raise RuntimeError(f"{self.name} failed")


@pytest.fixture
def engine(library_db):
    engine = create_library_engine(library_db)
    yield engine
    engine.dispose()


def recorded(engine):
    with engine.connect() as conn:
        return set(conn.scalars(select(AppliedMigration.name)))


def test_runs_pending_routines_in_order_and_records_them(engine):
    order = []
    first = RecordingRoutine('First')
    second = RecordingRoutine('Second')
    first.perform = lambda: order.append('First')
    second.perform = lambda: order.append('Second')

    performed = MigrationRunner(engine, [first, second]).run()

    assert performed == ['First', 'Second']
    assert order == ['First', 'Second']
    assert recorded(engine) == {'First', 'Second'}


def test_applied_routines_are_not_rerun(engine):
    routine = RecordingRoutine('Once')

    MigrationRunner(engine, [routine]).run()
    assert MigrationRunner(engine, [routine]).run() == []
    assert routine.calls == 1


def test_new_install_marks_legacy_routines_applied_without_running(engine):
    legacy = RecordingRoutine('Legacy', perform_on_new_install=False)
    always = RecordingRoutine('Always')

    performed = MigrationRunner(engine, [legacy, always]).run(is_new_install=True)

    assert performed == ['Always']
    assert legacy.calls == 0
    assert recorded(engine) == {'Legacy', 'Always'}


def test_failed_routine_is_not_recorded_and_stops_the_run(engine):
    broken = RecordingRoutine('Broken', fail=True)
    after = RecordingRoutine('After')

    with pytest.raises(RuntimeError):
        MigrationRunner(engine, [broken, after]).run()

    assert after.calls == 0
    assert recorded(engine) == set()


def test_rating_level_migration_through_runner(library_db, engine, add_items, read_levels, resolver):
    guids = add_items('PG-13', '')
    routine = MigrateRatingLevels(library_db, resolver)

    assert MigrationRunner(engine, [routine]).run() == ['MigrateRatingLevels']

    levels = read_levels()
    assert levels[guids[0]] == 13
    assert levels[guids[1]] is None
    assert str(MigrateRatingLevels.id) in MigrationRunner(engine, []).applied_ids()


def test_rating_level_migration_skipped_on_new_install(library_db, engine, add_items, read_levels, resolver):
    guids = add_items('PG-13', level=3)

    MigrationRunner(engine, [MigrateRatingLevels(library_db, resolver)]).run(is_new_install=True)

    assert read_levels()[guids[0]] == 3
    assert list(library_db.parent.glob('library.db.bak*')) == []
