"""Application configuration using Pydantic Settings."""
from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # Application
    APP_NAME: str = "Summer Research Tracker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Tracker document (one JSON file holds the whole store)
    DATA_FILE: str = "./data/tracker.json"
    BACKUP_DIR_NAME: str = "backups"
    BACKUP_KEEP: int = 10

    # File gateway
    STORAGE_ROOT: str = "./data/uploads"
    GATEWAY_CONFIG_PATH: str = "./data/config.json"
    PUBLIC_BASE_URL: str = "http://localhost:3001"
    MAX_UPLOAD_SIZE_MB: int = 50

    # Google APIs (token is issued out of band)
    GOOGLE_TOKEN_PATH: str = "./data/token.json"
    GMAIL_API_URL: str = "https://gmail.googleapis.com/gmail/v1"
    DRIVE_API_URL: str = "https://www.googleapis.com/drive/v3"
    DRIVE_UPLOAD_URL: str = "https://www.googleapis.com/upload/drive/v3"

    # Outreach reminders
    FOLLOWUP_AFTER_DAYS: int = 3

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def data_path(self) -> Path:
        p = Path(self.DATA_FILE)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p

    @property
    def gateway_config_path(self) -> Path:
        p = Path(self.GATEWAY_CONFIG_PATH)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p

    @property
    def token_path(self) -> Path:
        return Path(self.GOOGLE_TOKEN_PATH)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
