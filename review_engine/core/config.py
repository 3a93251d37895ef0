import os
import logging
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "Review Engine"
    environment: str = os.getenv("APP_ENV", "development")
    version: str = "1.0.0"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./review_engine.db")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Calibration
    calibration_min_justification_length: int = Field(
        default=int(os.getenv("CALIBRATION_MIN_JUSTIFICATION_LENGTH", "20")),
        ge=1,
    )

settings = Config()

# --- Startup Validation ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing") and settings.database_url.startswith("sqlite"):
    _logger.warning("⚠ Using SQLite outside development; concurrent submissions are not serialized.")
