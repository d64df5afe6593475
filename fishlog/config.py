from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from .core.models import Locale

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    """Application configuration settings."""
    model_config = SettingsConfigDict(
        # Load from .env file if present
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )

    # Flask settings
    FLASK_SECRET_KEY: str = Field("dev-secret-key")
    FLASK_DEBUG: bool = Field(False)
    HOST: str = Field("0.0.0.0")
    PORT: int = Field(5000)

    # Logging - falls back to DEBUG/INFO depending on FLASK_DEBUG
    LOG_LEVEL: str | None = Field(None)

    # Tracker settings
    DEFAULT_LOCALE: Locale = Field(Locale.ENGLISH) # Locale for newly opened sessions
    MAX_LINE_LENGTH: int = Field(1024, gt=0) # Longer log lines are never matched

# Create a single instance of settings to be imported elsewhere
settings = Settings()
