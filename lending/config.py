# lending/config.py
import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    # Database
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///lending.db"))
    sqlite_busy_timeout: float = field(default_factory=lambda: float(os.getenv("SQLITE_BUSY_TIMEOUT", "30")))
    pool_size: int = field(default_factory=lambda: int(os.getenv("DATABASE_POOL_SIZE", "5")))
    max_overflow: int = field(default_factory=lambda: int(os.getenv("DATABASE_MAX_OVERFLOW", "10")))

    # Cover images
    cover_storage_dir: str = field(default_factory=lambda: os.getenv("COVER_STORAGE_DIR", "storage/covers"))
    cover_url_prefix: str = field(default_factory=lambda: os.getenv("COVER_URL_PREFIX", "/storage/covers"))
    cover_max_bytes: int = field(default_factory=lambda: int(os.getenv("COVER_MAX_BYTES", str(5 * 1024 * 1024))))
    cover_extensions: Tuple[str, ...] = (".png", ".jpeg", ".jpg")

    # Catalog paging
    default_page_size: int = 10
    max_page_size: int = 100

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


def get_settings() -> Settings:
    """Build settings from the current environment"""
    return Settings()
