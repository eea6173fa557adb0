"""
Logging Service - Console/file handlers and the event-to-log bridge
"""
import logging
from pathlib import Path
from typing import Optional

from mediamigrate.config import settings
from mediamigrate.services.events import (
    BackupCreated,
    BackupFailed,
    LabelProcessed,
    MigrationCompleted,
    MigrationEvent,
    MigrationFailed,
)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_FILENAME = 'migrations.log'


class LoggingEventListener:
    """
    Event listener that reports migration events through the standard logging
    module. Successes log at INFO, failures at ERROR with the traceback attached.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('mediamigrate.migrations')

    def __call__(self, event: MigrationEvent) -> None:
        if isinstance(event, BackupCreated):
            self.logger.info("Library database backed up to %s", event.backup_path)
        elif isinstance(event, BackupFailed):
            self.logger.error(
                "Cannot make a backup of %s at path %s",
                event.source_path, event.backup_path,
                exc_info=event.error)
        elif isinstance(event, LabelProcessed):
            if event.label is None:
                self.logger.debug(
                    "Cleared rating level on %d rows without a rating",
                    event.rows_affected)
            else:
                self.logger.debug(
                    "Set rating level %s on %d rows rated '%s'",
                    event.level, event.rows_affected, event.label)
        elif isinstance(event, MigrationCompleted):
            self.logger.info(
                "%s finished: %d labels, %d rows updated",
                event.routine, event.labels_processed, event.rows_affected)
        elif isinstance(event, MigrationFailed):
            self.logger.error("%s failed", event.routine, exc_info=event.error)


# Handlers installed by setup_logging
_handlers: list[logging.Handler] = []


def setup_logging(
        level: Optional[str] = None,
        log_to_file: Optional[bool] = None,
        log_dir: Optional[Path] = None) -> None:
    """
    Set up console (and optionally file) logging for all mediamigrate loggers.
    Calling it again is a no-op.
    """
    if _handlers:
        return  # Already set up

    level = level or settings.log_level
    log_to_file = settings.log_to_file if log_to_file is None else log_to_file
    log_dir = Path(log_dir or settings.log_dir)

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    _handlers.append(console)

    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILENAME, encoding='utf-8')
        file_handler.setFormatter(formatter)
        _handlers.append(file_handler)

    app_logger = logging.getLogger('mediamigrate')
    for handler in _handlers:
        app_logger.addHandler(handler)
    app_logger.setLevel(level.upper() if isinstance(level, str) else level)


def teardown_logging() -> None:
    """Detach and close the handlers installed by setup_logging."""
    app_logger = logging.getLogger('mediamigrate')
    while _handlers:
        handler = _handlers.pop()
        app_logger.removeHandler(handler)
        handler.close()
