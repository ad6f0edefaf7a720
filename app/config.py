"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Reviews Blog API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)

    # Security
    SECRET_KEY: str = Field(min_length=32)
    ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 60 * 24 * 30
    SESSION_COOKIE_NAME: str = "session_token"

    # External identity provider (OAuth apps are configured out of process)
    GITHUB_ID: str | None = None
    GITHUB_SECRET: str | None = None
    GOOGLE_ID: str | None = None
    GOOGLE_SECRET: str | None = None

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(default=["http://localhost:3000"])

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Redis
    REDIS_URL: str = Field(default="redis://localhost:6379/0")

    # Rate Limiting
    RATE_LIMIT_BACKEND: str = Field(default="memory", pattern="^(memory|redis)$")
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=60, ge=1)
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=120, ge=1)
    RATE_LIMIT_SWEEP_INTERVAL_SECONDS: int = Field(default=60, ge=1)
    # Peers whose X-Forwarded-For header is believed; comma-separated in .env
    TRUSTED_PROXIES: str | list[str] = Field(default=[])

    # CSRF
    CSRF_COOKIE_NAME: str = "csrf-token"
    CSRF_HEADER_NAME: str = "X-CSRF-Token"
    CSRF_TOKEN_MAX_AGE: int = 24 * 60 * 60  # 24 hours

    # Image Upload
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB
    MAX_IMAGE_WIDTH: int = 1920
    MAX_IMAGE_HEIGHT: int = 1080
    WEBP_QUALITY: int = 80
    IMAGE_CACHE_MAX_AGE: int = 3600  # 1 hour

    # Admin dashboard
    RECENT_ACTIVITY_SIZE: int = 5

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @field_validator("CORS_ORIGINS", "TRUSTED_PROXIES", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse lists given as a comma-separated string"""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


class ReviewStatus:
    """Review publication status constants"""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

    ALL = (DRAFT, PUBLISHED, ARCHIVED)


class ReviewCategory:
    """Known review categories"""

    ANIME = "anime"
    MANGA = "manga"
    VIDEO_GAMES = "video-games"

    ALL = (ANIME, MANGA, VIDEO_GAMES)


class UserRole:
    """User role constants"""

    USER = "user"
    ADMIN = "admin"


class Locale:
    """Supported content locales"""

    ES = "es"
    EN = "en"

    ALL = (ES, EN)
