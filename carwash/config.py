# carwash/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database (durable key-value slots) ────────────────────────────────
    DATABASE_URL: str = "sqlite:///./carwash.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Business ──────────────────────────────────────────────────────────
    BUSINESS_NAME: str = "404 Studio Xpress"

    # ── Generative text (Gemini REST) ─────────────────────────────────────
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None   # Defaults to <project>/logs

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
