"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="NutriCoach", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/nutricoach",
        description="SQLAlchemy connection URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # LLM (OpenAI-compatible chat completion API)
    llm_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("llm_api_key", "deepseek_api_key"),
        description="Bearer token for the chat completion API",
    )
    llm_base_url: str = Field(
        default="https://api.deepseek.com",
        validation_alias=AliasChoices("llm_base_url", "deepseek_base_url"),
        description="Base URL of the chat completion API",
    )
    llm_model: str = Field(
        default="deepseek-chat",
        validation_alias=AliasChoices("llm_model", "deepseek_model"),
        description="Model name sent with every completion request",
    )
    llm_timeout_sec: float = Field(
        default=60.0, gt=0, description="Timeout for a single completion call"
    )
    llm_default_language: str = Field(
        default="ru", description="Answer language when a request does not set one"
    )

    # Lab report text recognition (tesseract)
    ocr_default_lang: str = Field(
        default="rus+eng", description="Tesseract language pack(s) for lab report images"
    )
    ocr_fetch_timeout_sec: float = Field(
        default=30.0, gt=0, description="Timeout for downloading a lab report image"
    )
    lab_report_max_chars: int = Field(
        default=9000, ge=100, description="Recognized text beyond this length is clipped"
    )

    # Hosted object storage
    storage_url: Optional[str] = Field(
        default=None, description="Base URL of the hosted storage service"
    )
    storage_api_key: Optional[str] = Field(
        default=None, description="Service key for the storage API"
    )
    storage_docs_bucket: str = Field(
        default="nutritionist_documents", description="Bucket holding specialist documents"
    )
    storage_media_bucket: str = Field(
        default="nutritionist_backgrounds",
        description="Bucket holding specialist avatars and covers",
    )
    storage_timeout_sec: float = Field(
        default=15.0, gt=0, description="Timeout for storage listing calls"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="NutriCoach API", description="API documentation title"
    )
    api_description: str = Field(
        default="Nutrition coaching backend for specialists and their clients",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("llm_default_language")
    @classmethod
    def validate_language(cls, v):
        v = v.lower().strip()
        if v not in ("ru", "en"):
            raise ValueError("llm_default_language must be 'ru' or 'en'")
        return v

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def storage_buckets(self) -> tuple[str, ...]:
        """Buckets the listing endpoint may expose"""
        return (self.storage_docs_bucket, self.storage_media_bucket)


# Global settings instance
settings = Settings()
