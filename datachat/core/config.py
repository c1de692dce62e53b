"""
Core Configuration
Centralized settings using Pydantic BaseSettings
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==========================================
    # APPLICATION
    # ==========================================
    APP_NAME: str = "DataChat API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # ==========================================
    # LOGGING
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # ==========================================
    # ANTHROPIC API
    # ==========================================
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_MAX_TOKENS: int = 1000
    ANTHROPIC_TIMEOUT: float = 30.0  # seconds
    ANTHROPIC_MAX_RETRIES: int = 1

    # ==========================================
    # CORS
    # ==========================================
    BACKEND_CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # ==========================================
    # FILE UPLOAD
    # ==========================================
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_EXTENSIONS: set = {".csv", ".json", ".sql"}
    PREVIEW_ROWS: int = 10
    MAX_PREVIEW_ROWS: int = 100

    # ==========================================
    # QUERY SETTINGS
    # ==========================================
    PROMPT_SAMPLE_ROWS: int = 10
    DEFAULT_QUERY_LIMIT: int = 10
    CHART_MAX_ROWS: int = 50
    SYNTHETIC_ROW_COUNT: int = 50

    class Config:
        env_file = ".env"
        case_sensitive = True


# ==========================================
# SINGLETON INSTANCE
# ==========================================

settings = Settings()


# ==========================================
# DERIVED SETTINGS
# ==========================================

def is_production() -> bool:
    """Check if running in production"""
    return settings.ENVIRONMENT.lower() == "production"


def is_development() -> bool:
    """Check if running in development"""
    return settings.ENVIRONMENT.lower() == "development"


# ==========================================
# EXPORT
# ==========================================

__all__ = [
    "settings",
    "Settings",
    "is_production",
    "is_development"
]
