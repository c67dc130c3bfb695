# backend/focusflow/core/config.py
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Remote store. No URI means the coordinator always runs in demo mode.
    MONGO_URI: Optional[str] = None
    MONGO_DB_NAME: str = "focusflow"
    MONGO_TIMEOUT_MS: int = 3000

    # Auth: the UI hands us an access token issued with the same secret.
    JWT_SECRET_KEY: str = "super-secret-key"
    FOCUS_ACCESS_TOKEN: Optional[str] = None

    # Timer / audio
    TICK_INTERVAL_SECONDS: float = 1.0
    AUDIO_DEBOUNCE_SECONDS: float = 0.5
    SOUNDS_DIR: str = "sounds"
    AUDIO_BACKEND: str = "silent"  # silent | pygame

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:1420",
        "http://127.0.0.1:1420",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
