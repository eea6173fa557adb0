"""Recompute parental rating levels in a library database.

Usage: python backend/scripts/migrate_rating_levels.py [--db PATH] [--country us] [--ratings-dir DIR]

A numbered backup (library.db.bak1, .bak2, ...) is written next to the
database before anything is changed.
"""
import argparse
import os
import sys
from pathlib import Path

# Ensure the backend package is on sys.path when running as a script from repo root
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mediamigrate.config import settings
from mediamigrate.migrations import MigrateRatingLevels
from mediamigrate.services.backup import BackupError
from mediamigrate.services.logging_service import LoggingEventListener, setup_logging
from mediamigrate.services.ratings import load_default_resolver



def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Recompute parental rating levels from rating labels')
    parser.add_argument('--db', type=Path, default=None, help='Library database (default: configured data_dir/library.db)')
    parser.add_argument('--country', default=None, help='Preferred rating country, e.g. us, gb, de')
    parser.add_argument('--ratings-dir', type=Path, default=None, help='Directory of <country>.csv rating files')
    args = parser.parse_args(argv)

    setup_logging()
    db_path = args.db or settings.library_db_path
    resolver = load_default_resolver(args.country, args.ratings_dir)
    routine = MigrateRatingLevels(db_path, resolver, listener=LoggingEventListener())

    try:
        summary = routine.perform()
    except BackupError:
        print('Backup failed; the library database was not modified.')
        return 1
    except Exception:
        print(f'Migration failed; restore from the backup next to {db_path} if needed.')
        return 1

    print(f"Backup written to {summary.backup_path}")
    print(f"Labels processed: {summary.labels_processed}")
    print(f"Rows updated: {summary.rows_affected}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
