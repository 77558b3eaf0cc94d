"""Application configuration via environment variables."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Event Check-in Kiosk"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"  # Bind to all interfaces so kiosks on the LAN can reach it
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./checkin_kiosk.db"

    # Search
    search_limit: int = 50

    # Logging
    log_dir: Path = Path.home() / ".logs" / "checkin_kiosk"


settings = Settings()
