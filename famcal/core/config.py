from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl, field_validator
import os
from pathlib import Path

# Ensure the SQLite database directory exists
sqlite_db_path = Path("./sqlite_db")
sqlite_db_path.mkdir(exist_ok=True)

class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "Family Calendar"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # Server settings
    PORT: int = int(os.environ.get("PORT", 8000))

    # Testing
    TESTING: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Security Headers
    SECURITY_HEADERS: bool = True
    HSTS_MAX_AGE: int = 31536000  # 1 year

    # Request body limit
    MAX_CONTENT_LENGTH: int = 64 * 1024  # 64KB

    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./sqlite_db/famcal.db")
    SQL_ECHO: bool = False

    # Documentation
    SHOW_DOCS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    # Calendar grid (day and week views)
    GRID_START_HOUR: int = 6
    GRID_END_HOUR: int = 22
    GRID_MIN_HEIGHT_PERCENT: float = 4.0

    # Projection limits
    MAX_OCCURRENCES_PER_EVENT: int = 100
    MAX_WINDOW_DAYS: int = 366

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", env_file_encoding="utf-8")

# Global instance
settings = Settings()

# Header carrying the acting family member id
MEMBER_HEADER = "X-Member-ID"
