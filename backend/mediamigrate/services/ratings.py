"""
Rating Service - Resolves free-text parental rating labels to numeric levels

Rating systems are plain CSV files, one per country (``us.csv``, ``de.csv``),
each row holding ``label,level``.
"""
import csv
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

logger = logging.getLogger(__name__)

# Labels meaning "no rating" rather than an unknown rating system
UNRATED_LABELS = {'n/a', 'unrated', 'not rated', 'nr'}

# Rating systems shipped with the package
BUILTIN_RATINGS_DIR = Path(__file__).parent.parent / 'ratings'

# Largest value an INTEGER column can hold
MAX_LEVEL = 2**63 - 1


class RatingResolver(ABC):
    """Maps a rating label to a numeric parental level, if one is known."""

    @abstractmethod
    def get_level(self, label: str) -> Optional[int]:
        ...


class MappingRatingResolver(RatingResolver):
    """
    Resolver backed by in-memory rating systems.

    ``primary`` is the rating system of the configured country and is
    consulted first; ``fallbacks`` are the remaining systems, tried in order
    when the primary one has no entry. Lookups are case-insensitive.
    """

    def __init__(
            self,
            primary: Mapping[str, int],
            fallbacks: Iterable[Mapping[str, int]] = ()):
        self._primary = self._normalize(primary)
        self._fallbacks = [self._normalize(m) for m in fallbacks]

    @staticmethod
    def _normalize(mapping: Mapping[str, int]) -> dict[str, int]:
        return {label.strip().casefold(): int(level) for label, level in mapping.items()}

    def _lookup(self, label: str) -> Optional[int]:
        key = label.strip().casefold()
        if key in self._primary:
            return self._primary[key]
        for system in self._fallbacks:
            if key in system:
                return system[key]
        return None

    def get_level(self, label: str) -> Optional[int]:
        if not label or not label.strip():
            return None

        label = label.strip()
        if label.casefold() in UNRATED_LABELS:
            return None

        # Plain numbers are already levels; anything past SQLite INTEGER is not a level
        if label.isascii() and label.isdigit():
            level = int(label)
            return level if level <= MAX_LEVEL else None

        level = self._lookup(label)
        if level is not None:
            return level

        # "Germany: FSK-18" -> "FSK-18"
        prefix, _, rest = label.rpartition(':')
        if prefix.strip():
            return self.get_level(rest)

        # Country prefixed labels, "DE-18" -> "18"
        prefix, _, rest = label.rpartition('-')
        if prefix.strip():
            return self.get_level(rest)

        return None

    @classmethod
    def from_csv_dir(cls, directory: Union[str, Path], country: str) -> 'MappingRatingResolver':
        """Load every ``<country>.csv`` in ``directory``; ``country`` wins on conflicts."""
        directory = Path(directory)
        systems: dict[str, dict[str, int]] = {}
        for csv_file in sorted(directory.glob('*.csv')):
            systems[csv_file.stem.lower()] = load_rating_csv(csv_file)

        primary = systems.pop(country.lower(), None)
        if primary is None:
            logger.warning(f"No rating system found for country '{country}' in {directory}")
            primary = {}
        return cls(primary, systems.values())


def load_rating_csv(path: Path) -> dict[str, int]:
    """Read ``label,level`` rows, skipping blank lines and rows without a numeric level."""
    ratings: dict[str, int] = {}
    with open(path, newline='', encoding='utf-8') as f:
        for row in csv.reader(f):
            if len(row) < 2 or not row[0].strip():
                continue
            try:
                ratings[row[0].strip()] = int(row[1])
            except ValueError:
                logger.debug(f"Skipping rating row without numeric level in {path.name}: {row}")
    return ratings


def load_default_resolver(country: Optional[str] = None, ratings_dir: Optional[Path] = None) -> MappingRatingResolver:
    """Resolver over the configured ratings directory, or the bundled rating systems."""
    from mediamigrate.config import settings

    return MappingRatingResolver.from_csv_dir(
        ratings_dir or settings.ratings_dir or BUILTIN_RATINGS_DIR,
        country or settings.rating_country)
