"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Narumate"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (hosted relational database)
    # Leaving either value empty runs the app in local mode: nothing is persisted.
    DATABASE_URL: str = ""  # e.g. mysql+pymysql://narumate@db.example.com:3306/narumate
    DATABASE_ACCESS_KEY: str = ""  # Injected as the connection password
    DB_ECHO: bool = False

    # Single anonymous owner until authentication exists
    DEFAULT_USER_ID: str = "anonymous"

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:5173", "http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Hugging Face inference
    HUGGINGFACE_API_KEY: str = ""  # Optional, raises rate limits when set
    HUGGINGFACE_API_URL: str = "https://api-inference.huggingface.co/models"
    HUGGINGFACE_TIMEOUT: Optional[float] = None  # None = no timeout, or seconds

    @property
    def persistence_enabled(self) -> bool:
        """True when both the database endpoint and its access key are configured."""
        return bool(self.DATABASE_URL and self.DATABASE_ACCESS_KEY)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
