import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "Beverage King Insiders Club"
    API_BASE_URL: str = "http://localhost:8083"
    API_PREFIX: str = "/api"
    REQUEST_TIMEOUT: Optional[float] = None  # None leaves timeouts to the transport
    SESSION_FILE: str = "data/session.json"
    EXPORT_DIR: str = "exports"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = True

settings = Settings()

# Ensure directories exist
os.makedirs(settings.EXPORT_DIR, exist_ok=True)
os.makedirs(os.path.dirname(settings.SESSION_FILE) or ".", exist_ok=True)
