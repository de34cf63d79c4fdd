"""Configuration settings for NoteMind."""

import os
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv

from notemind.exceptions import ConfigurationError

load_dotenv()


class Settings:
    """Application settings loaded from environment variables.

    Keyword arguments override the environment, which is how tests build
    isolated settings objects.
    """

    def __init__(self, **overrides: Any) -> None:
        # Database
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./notemind.db")

        # JWT
        self.JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_DAYS: int = int(os.getenv("JWT_EXPIRE_DAYS", "30"))

        # Passwords
        self.BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
        self.PASSWORD_RESET_EXPIRE_MINUTES: int = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "10"))

        # AI
        self.OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
        self.AI_MAX_TOKENS: int = int(os.getenv("AI_MAX_TOKENS", "300"))

        # Upload
        self.UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
        self.MAX_AVATAR_SIZE_MB: int = int(os.getenv("MAX_AVATAR_SIZE_MB", "5"))

        # Application
        self.CORS_ORIGINS: list[str] = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if origin.strip()
        ]
        self.APP_ENV: str = os.getenv("APP_ENV", "development")
        self.DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    def validate(self) -> None:
        """Fail fast on settings the app cannot serve without."""
        if not self.JWT_SECRET_KEY:
            raise ConfigurationError("JWT_SECRET_KEY is not set; refusing to issue or verify tokens")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
