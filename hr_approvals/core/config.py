import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "HR Approvals"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./approvals.db")
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "10"))
    db_busy_timeout: float = float(os.getenv("DB_BUSY_TIMEOUT", "15"))

    # Deployment metadata
    version: str = "1.0.0"
    build_id: str = os.getenv("BUILD_ID", "local")
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    # Approval workflow
    max_bulk_items: int = int(os.getenv("MAX_BULK_ITEMS", "200"))
    daily_regular_hours: float = float(os.getenv("DAILY_REGULAR_HOURS", "8"))
    weekly_regular_hours: float = float(os.getenv("WEEKLY_REGULAR_HOURS", "40"))
    working_days: List[str] = Field(
        default_factory=lambda: [
            d.strip().lower()
            for d in os.getenv("WORKING_DAYS", "monday,tuesday,wednesday,thursday,friday").split(",")
            if d.strip()
        ]
    )

settings = Config()

# --- Startup Validation ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if settings.database_url.startswith("sqlite"):
        _logger.warning("⚠ Running a non-development environment on SQLite; conditional writes serialize on the whole database.")
if settings.max_bulk_items < 1:
    raise RuntimeError("FATAL: MAX_BULK_ITEMS must be a positive integer.")
if not 0 < settings.daily_regular_hours <= 24:
    raise RuntimeError("FATAL: DAILY_REGULAR_HOURS must be within (0, 24].")
if not 0 < settings.weekly_regular_hours <= 168:
    raise RuntimeError("FATAL: WEEKLY_REGULAR_HOURS must be within (0, 168].")
_unknown_days = set(settings.working_days) - {
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
}
if not settings.working_days or _unknown_days:
    raise RuntimeError(f"FATAL: WORKING_DAYS must list weekday names, got {sorted(_unknown_days) or 'nothing'}.")
