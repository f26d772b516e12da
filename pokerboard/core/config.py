from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Search .env in CWD first, then parent dir.
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Database (required, no default) ---
    DATABASE_URL: str
    # Optional logical database name; replaces the database part of DATABASE_URL
    DATABASE_NAME: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_CONNECT_TIMEOUT: int = 5  # seconds
    DB_POOL_TIMEOUT: int = 10  # seconds
    DB_STATEMENT_TIMEOUT_MS: int = 45000  # postgres only

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # --- Leaderboard ---
    RECENT_SESSIONS_LIMIT: int = 50
    GAME_RATE_LIMIT: str = "60/minute"

    # --- Observability ---
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # development | staging | production

    # --- CORS (comma-separated string parsed into a list) ---
    CORS_ORIGINS: str = "*"

    @field_validator("DATABASE_URL")
    @classmethod
    def database_url_must_be_set(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("DATABASE_URL must not be empty")
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def log_level_must_be_valid(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}")
        return v.upper()

    @field_validator("RECENT_SESSIONS_LIMIT")
    @classmethod
    def sessions_limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("RECENT_SESSIONS_LIMIT must be at least 1")
        return v

    def get_cors_origins(self) -> List[str]:
        """Parse comma-separated CORS_ORIGINS into a list."""
        return [
            origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()
        ]

    def is_dev_environment(self) -> bool:
        return self.ENVIRONMENT.lower() in {"development", "dev", "testing", "test"}


settings = Settings()
