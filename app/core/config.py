"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Party Planner"
    debug: bool = False
    log_dir: str = "~/.logs/party_planner"

    # Local storage (snapshot slot + selected party)
    storage_dir: str = "./.party_planner"
    snapshot_key: str = "party-planner-db"
    selected_party_key: str = "selected-party-id"

    # Snapshot settings
    snapshot_interval_seconds: int = 30

    # CORS
    allowed_origins: str = "*"

    # Export / import
    export_dir: str = "./exports"
    export_version: str = "1.0"


settings = Settings()
