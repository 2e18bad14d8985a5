"""
Configuration management for the blog record service.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List
from urllib.parse import quote_plus


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Blog Record API"
    API_VERSION: str = "0.1.0"
    API_DESCRIPTION: str = "CRUD API for blog posts with local image uploads"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    # Database Configuration
    # DATABASE_URL wins when set, otherwise the URL is built from the DB_* parts
    DATABASE_URL: str = ""
    DB_DRIVER: str = "mysql+aiomysql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "blogs"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    AUTO_CREATE_TABLES: bool = True

    # Image uploads
    UPLOAD_DIR: str = "public/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    DEFAULT_IMAGE_NAME: str = "default"

    @property
    def database_url(self) -> str:
        """Effective SQLAlchemy async URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        credentials = self.DB_USER
        if self.DB_PASSWORD:
            credentials = f"{self.DB_USER}:{quote_plus(self.DB_PASSWORD)}"
        return f"{self.DB_DRIVER}://{credentials}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Default settings instance, used when create_app() is not handed one
settings = Settings()
