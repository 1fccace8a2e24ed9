from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "SmartPark API"
    debug: bool = False
    environment: str = "production"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    # Storage
    database_url: str = "sqlite+aiosqlite:///./smartpark.db"

    # Security
    secret_key: str = "change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480
    admin_username: str = "admin"
    admin_password: str = "admin"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Parking Settings
    hourly_rate: float = 500.0
    currency: str = "RWF"
    initial_slot_count: int = 4
    top_slots_limit: int = 5


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
