# teisesdraugas/core/config.py
"""
Application configuration using Pydantic Settings
"""
from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "Teisės Draugas"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./teisesdraugas.db"

    # JWT Authentication (tokens are issued by the identity provider)
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    # AWS Configuration
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "eu-central-1"

    # Bedrock (Claude)
    BEDROCK_MODEL_ID: str = "anthropic.claude-sonnet-4-20250514-v1:0"
    ANALYSIS_MAX_TOKENS: int = 2000
    DEMAND_LETTER_MAX_TOKENS: int = 3000
    NEGOTIATION_MAX_TOKENS: int = 1500
    AI_TEMPERATURE: float = 0.3

    @field_validator("BEDROCK_MODEL_ID", mode="before")
    @classmethod
    def strip_bedrock_model_id(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    # Evidence storage
    STORAGE_BACKEND: str = "local"  # local | s3
    LOCAL_STORAGE_DIR: str = "."  # files land in {LOCAL_STORAGE_DIR}/uploads/{case_id}/
    S3_BUCKET_NAME: str = "teisesdraugas-evidence"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_MIME_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]

    # E. pristatymas (demand letter delivery)
    DELIVERY_BACKEND: str = "simulated"  # simulated | live
    E_PRISTATYMAS_API_URL: str = ""
    E_PRISTATYMAS_API_KEY: str = ""

    # e.teismas (court e-filing)
    FILING_BACKEND: str = "simulated"  # simulated | live
    E_TEISMAS_API_URL: str = ""
    E_TEISMAS_API_KEY: str = ""

    # Workflow
    LAWYER_REVIEW_FEE: Decimal = Decimal("20.00")
    DEFAULT_RESPONSE_DEADLINE_DAYS: int = 14

    # Generated documents
    PLATFORM_NAME: str = "Teisės Draugas"
    PLATFORM_URL: str = "www.teisesdraugas.lt"
    PDF_FONT_PATH: str = ""  # TTF with Lithuanian glyphs; Helvetica when blank

    # CORS
    CORS_ORIGINS: str = '["http://localhost:3000"]'

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("STORAGE_BACKEND", "DELIVERY_BACKEND", "FILING_BACKEND", mode="before")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            return json.loads(self.CORS_ORIGINS)
        except json.JSONDecodeError:
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Create settings instance
settings = Settings()
