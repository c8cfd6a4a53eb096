# backend/lawhelper/core/config.py
"""
Application configuration using Pydantic Settings
"""
import json
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "LawHelper"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    AUTO_CREATE_TABLES: bool = False

    # Sessions
    SESSION_SECRET: str
    SESSION_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "lawhelper_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_TTL_HOURS: int = 24 * 7

    # AWS Configuration
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "us-east-1"
    BEDROCK_MODEL_ID: str = "anthropic.claude-3-haiku-20240307-v1:0"

    # AI gateway
    AI_TIMEOUT_SECONDS: int = 45
    AI_CONNECT_TIMEOUT_SECONDS: int = 10
    AI_MAX_TOKENS: int = 4096
    AI_TEMPERATURE: float = 0.2

    @field_validator("BEDROCK_MODEL_ID", mode="before")
    @classmethod
    def strip_bedrock_model_id(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    # S3 (optional archive of uploaded source files)
    S3_BUCKET_NAME: str = "lawhelper-uploads"
    UPLOAD_ARCHIVE_ENABLED: bool = False

    # Uploads
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024            # summarizer and generic uploads
    MAX_ANALYZER_UPLOAD_BYTES: int = 10 * 1024 * 1024   # document analyzer

    # History
    SEARCH_HISTORY_LIMIT: int = 10

    # Demo data (db/seed.py)
    DEMO_ACCOUNT_EMAIL: str = "demo@lawhelper.ai"
    DEMO_ACCOUNT_PASSWORD: str = ""

    # CORS
    CORS_ORIGINS: str = '["http://localhost:5173"]'

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            origins = json.loads(self.CORS_ORIGINS)
        except ValueError:
            return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        if isinstance(origins, str):
            return [origins]
        return list(origins)


settings = Settings()
