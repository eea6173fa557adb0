from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Migration settings with environment variable support"""

    # Application info
    app_name: str = "MediaMigrate"
    app_version: str = "0.1.0"

    # Library database
    data_dir: Path = Path("./data")
    library_db_filename: str = "library.db"

    # Backups taken before a routine mutates the library
    backup_suffix: str = ".bak"
    max_backup_attempts: int = 1000

    # Parental rating lookup
    rating_country: str = "us"
    ratings_dir: Optional[Path] = None

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("./logs")
    log_to_file: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "MM_"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def library_db_path(self) -> Path:
        return self.data_dir / self.library_db_filename


settings = Settings()
