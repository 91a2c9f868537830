# core/config.py

from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Loads application settings from .env file."""
    mongo_uri: Optional[str] = None
    mongo_user: Optional[str] = None
    mongo_password: Optional[str] = None
    mongo_host: str = "localhost"
    mongo_port: int = 27017
    db_name: str = "field_data_db"

    # Generative Language API (Gemini). Without a key the assistant answers from canned guidance.
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-pro"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 30.0

    # Dashboard
    dashboard_recent_window: int = 10
    dashboard_field_limit: int = 5

    @property
    def final_mongo_uri(self) -> str:
        """Constructs safe MongoDB URI from components (preferred) or returns the provided one."""
        if self.mongo_user and self.mongo_password:
            import urllib.parse
            user = urllib.parse.quote_plus(self.mongo_user)
            password = urllib.parse.quote_plus(self.mongo_password)
            return f"mongodb+srv://{user}:{password}@{self.mongo_host}/"

        if self.mongo_uri:
            return self.mongo_uri

        return f"mongodb://{self.mongo_host}:{self.mongo_port}/"

    class Config:
        env_file = ".env"
        extra = "ignore"

# Create a single, reusable instance of the settings
settings = Settings()
