"""
Migration events - structured notifications emitted by migration routines

Routines never print or log directly; they hand these events to a listener so
an observability layer (see logging_service) decides how to report them.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union


@dataclass(frozen=True)
class BackupCreated:
    """A backup copy of the library database was written"""
    source_path: Path
    backup_path: Path


@dataclass(frozen=True)
class BackupFailed:
    """The backup could not be written; no data has been touched"""
    source_path: Path
    backup_path: Optional[Path]
    error: BaseException


@dataclass(frozen=True)
class LabelProcessed:
    """All rows sharing one OfficialRating were rewritten.

    ``label`` is None for the group of rows whose rating is NULL or empty.
    """
    label: Optional[str]
    level: Optional[int]
    rows_affected: int


@dataclass(frozen=True)
class MigrationCompleted:
    routine: str
    labels_processed: int
    rows_affected: int


@dataclass(frozen=True)
class MigrationFailed:
    routine: str
    error: BaseException


MigrationEvent = Union[BackupCreated, BackupFailed, LabelProcessed, MigrationCompleted, MigrationFailed]
EventListener = Callable[[MigrationEvent], None]


class EventBus:
    """Fan events out to every registered listener in registration order."""

    def __init__(self, *listeners: EventListener):
        self._listeners: list[EventListener] = list(listeners)

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __call__(self, event: MigrationEvent) -> None:
        for listener in list(self._listeners):
            listener(event)


def _discard(event: MigrationEvent) -> None:
    pass


def resolve_listener(listener: Optional[EventListener]) -> EventListener:
    """Return ``listener`` or a no-op listener when none was given."""
    return listener if listener is not None else _discard
