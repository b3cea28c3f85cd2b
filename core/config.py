# core/config.py

from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Loads application settings from .env file."""
    app_name: str = "AgriGenius API"
    host: str = "0.0.0.0"
    port: int = 8000

    # The browser UI has no login, so "current" lookups resolve against this user.
    demo_user_id: int = 1
    seed_sample_data: bool = True

    cors_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"

# Create a single, reusable instance of the settings
settings = Settings()
