"""Application configuration using Pydantic Settings."""
from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # Application
    APP_NAME: str = "EduFeedback"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./data/edufeedback.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Auth
    SECRET_KEY: str = "edufeedback-secret-key-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Moderation
    ABUSE_WORDS: str = ""                      # comma-separated; empty = built-in list
    OVERDUE_DOUBT_DAYS: int = 5
    QR_FEEDBACK_EMAIL: str = "qr-feedback@internal.local"

    # Leaderboards
    IMPROVEMENT_WINDOW_DAYS: int = 30

    # Hosted inference (Hugging Face)
    HF_API_TOKEN: str = ""
    HF_API_URL: str = "https://api-inference.huggingface.co/models"
    HF_MODEL: str = "mistralai/Mistral-7B-Instruct-v0.2"
    HF_FALLBACK_MODEL: str = "google/flan-t5-large"
    HF_MAX_NEW_TOKENS: int = 512
    AI_TIMEOUT_SECONDS: float = 30.0

    # Startup seeding
    SEED_ON_STARTUP: bool = True
    ADMIN_EMAIL: str = "admin@edu.com"
    ADMIN_PASSWORD: str = "admin123"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def sqlite_path(self) -> Path | None:
        if not self.DATABASE_URL.startswith("sqlite:///"):
            return None
        raw = self.DATABASE_URL.replace("sqlite:///", "")
        if not raw or raw == ":memory:":
            return None
        return Path(raw)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
