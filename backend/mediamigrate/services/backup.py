"""
Backup Service - Sequentially numbered copies of the library database
"""
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from mediamigrate.config import settings
from mediamigrate.services.events import BackupCreated, BackupFailed, EventListener, resolve_listener


class BackupError(OSError):
    """The library database could not be copied to a backup slot."""

    def __init__(self, message: str, source_path: Path, backup_path: Optional[Path] = None):
        super().__init__(message)
        self.source_path = source_path
        self.backup_path = backup_path


class BackupSlotsExhaustedError(BackupError):
    """Every numbered backup slot up to the configured ceiling is taken."""


class BackupManager:
    """
    Writes ``<source><suffix><n>`` for the smallest ``n`` with no file yet.
    Existing backups are never overwritten.
    """

    def __init__(
            self,
            suffix: Optional[str] = None,
            max_attempts: Optional[int] = None,
            listener: Optional[EventListener] = None):
        self.suffix = suffix if suffix is not None else settings.backup_suffix
        self.max_attempts = max_attempts if max_attempts is not None else settings.max_backup_attempts
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.listener = resolve_listener(listener)

    def backup_path_for(self, source_path: Union[str, Path], sequence: int) -> Path:
        return Path(f"{source_path}{self.suffix}{sequence}")

    def next_backup_path(self, source_path: Union[str, Path]) -> Path:
        """Return the first free backup slot for ``source_path``."""
        for sequence in range(1, self.max_attempts + 1):
            candidate = self.backup_path_for(source_path, sequence)
            if not os.path.lexists(candidate):
                return candidate
        raise BackupSlotsExhaustedError(
            f"All {self.max_attempts} backup slots for '{source_path}' are in use",
            Path(source_path))

    def create_backup(self, source_path: Union[str, Path]) -> Path:
        """Copy ``source_path`` byte for byte into the next free slot and return the slot path.

        Raises BackupError (an OSError) on any failure; a half-written copy
        is removed before raising.
        """
        source_path = Path(source_path)
        backup_path = None
        try:
            backup_path = self._copy_to_free_slot(source_path)
        except BackupError as e:
            self.listener(BackupFailed(source_path, e.backup_path, e))
            raise
        except OSError as e:
            error = BackupError(
                f"Cannot back up '{source_path}': {e.strerror or e}", source_path, backup_path)
            self.listener(BackupFailed(source_path, backup_path, error))
            raise error from e

        self.listener(BackupCreated(source_path, backup_path))
        return backup_path

    def _copy_to_free_slot(self, source_path: Path) -> Path:
        with open(source_path, 'rb') as src:
            while True:
                backup_path = self.next_backup_path(source_path)
                try:
                    # Exclusive create: a slot taken since the check is skipped, not clobbered
                    dst = open(backup_path, 'xb')
                except FileExistsError:
                    continue
                except OSError as e:
                    raise BackupError(
                        f"Cannot create backup '{backup_path}': {e.strerror or e}",
                        source_path, backup_path) from e

                try:
                    with dst:
                        shutil.copyfileobj(src, dst)
                        dst.flush()
                        os.fsync(dst.fileno())
                except OSError as e:
                    try:
                        os.remove(backup_path)
                    except OSError:
                        pass
                    raise BackupError(
                        f"Cannot write backup '{backup_path}': {e.strerror or e}",
                        source_path, backup_path) from e

                return backup_path
