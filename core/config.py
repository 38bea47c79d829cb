# core/config.py
import os
from dataclasses import dataclass, field
from typing import List


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime settings, read from the environment at construction time."""

    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///library.db"))
    # Seconds a SQLite writer waits for the lock before giving up
    sqlite_timeout: float = field(default_factory=lambda: float(os.getenv("LIBRARY_SQLITE_TIMEOUT", "30")))

    loan_days: int = field(default_factory=lambda: int(os.getenv("LIBRARY_LOAN_DAYS", "14")))
    renewal_days: int = field(default_factory=lambda: int(os.getenv("LIBRARY_RENEWAL_DAYS", "14")))
    max_renewals: int = field(default_factory=lambda: int(os.getenv("LIBRARY_MAX_RENEWALS", "2")))

    log_level: str = field(default_factory=lambda: os.getenv("LIBRARY_LOG_LEVEL", "INFO"))
    cors_origins: List[str] = field(
        default_factory=lambda: _split(os.getenv("LIBRARY_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"))
    )


settings = Settings()
