# Environment-driven settings (.env supported)
from functools import lru_cache
from typing import List

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RECIPE_API_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "recipe_api"
    mongo_timeout_ms: int = 5000

    jwt_secret: str = "change-me"  # override in every real deployment
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    # settings travel with the app instance, see create_app
    return request.app.state.settings
