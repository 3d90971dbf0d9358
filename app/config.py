from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration settings"""

    # App
    environment: Literal["development", "production"] = "development"
    app_name: str = "Song Suggestion API"
    host: str = "0.0.0.0"
    port: int = 3009

    # API
    api_prefix: str = "/api"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "song_suggestions"
    mongodb_collection: str = "songs"
    mongodb_timeout_ms: int = 5000

    # HTTP
    cors_origins: list[str] = ["*"]
    max_body_size: int = 10 * 1024 * 1024  # 10MB

    # Logging
    log_level: str = "INFO"

    @property
    def songs_prefix(self) -> str:
        return f"{self.api_prefix}/songs"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()
