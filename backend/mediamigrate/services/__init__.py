"""Services package exports for convenience."""
from mediamigrate.services.backup import BackupManager, BackupError, BackupSlotsExhaustedError
from mediamigrate.services.events import EventBus
from mediamigrate.services.logging_service import LoggingEventListener, setup_logging
from mediamigrate.services.ratings import RatingResolver, MappingRatingResolver

__all__ = [
    'BackupManager',
    'BackupError',
    'BackupSlotsExhaustedError',
    'EventBus',
    'LoggingEventListener',
    'setup_logging',
    'RatingResolver',
    'MappingRatingResolver',
]
