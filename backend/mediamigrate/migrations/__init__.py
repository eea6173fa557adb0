"""Upgrade-time migration routines."""
from mediamigrate.migrations.base import MigrationRoutine
from mediamigrate.migrations.rating_levels import MigrateRatingLevels, MigrationSummary
from mediamigrate.migrations.runner import MigrationRunner

__all__ = [
    'MigrationRoutine',
    'MigrateRatingLevels',
    'MigrationSummary',
    'MigrationRunner',
]
