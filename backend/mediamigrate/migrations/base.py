"""Base class for one-shot upgrade routines run by MigrationRunner."""
import uuid
from abc import ABC, abstractmethod


class MigrationRoutine(ABC):
    """
    A data migration applied once per library.

    Subclasses set ``id`` (stable across releases, used to record that the
    routine ran), a human-readable ``name``, and ``perform_on_new_install``;
    routines that only repair legacy data set it to False so a fresh library
    is marked as migrated without running them.
    """

    id: uuid.UUID
    name: str
    perform_on_new_install: bool = True

    @abstractmethod
    def perform(self):
        ...
