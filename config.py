from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Process configuration, read once from the environment (and `.env`).

    JWT_SECRET is mandatory: tokens cannot be issued or checked without it,
    so a missing secret stops the app at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    jwt_secret: str = Field(validation_alias="JWT_SECRET")
    jwt_alg: str = Field(default="HS256", validation_alias="JWT_ALG")
    jwt_exp_hours: int = Field(default=24, validation_alias="JWT_EXP_HOURS")
    reset_token_exp_minutes: int = Field(default=10, validation_alias="RESET_TOKEN_EXP_MINUTES")
    require_reset_token: bool = Field(default=False, validation_alias="REQUIRE_RESET_TOKEN")

    database_url: str = Field(default="sqlite:///./jobsetu.db", validation_alias="DATABASE_URL")

    brevo_api_key: Optional[str] = Field(default=None, validation_alias="BREVO_API_KEY")
    email_from: Optional[str] = Field(default=None, validation_alias=AliasChoices("BREVO_FROM", "EMAIL_FROM"))
    email_from_name: str = Field(default="JobSetu", validation_alias="EMAIL_FROM_NAME")
    admin_notification_email: Optional[str] = Field(default=None, validation_alias="ADMIN_NOTIFICATION_EMAIL")
    contact_us_email: Optional[str] = Field(default=None, validation_alias="CONTACT_US_EMAIL")

    aws_region: str = Field(default="ap-south-1", validation_alias="AWS_REGION")
    s3_bucket: Optional[str] = Field(default=None, validation_alias="AWS_S3_BUCKET")
    presigned_url_expires: int = Field(default=3600, validation_alias="PRESIGNED_URL_EXPIRES")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, validation_alias="MAX_UPLOAD_BYTES")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    tz: str = Field(default="UTC", validation_alias="TZ")

    @field_validator("database_url")
    @classmethod
    def _select_driver(cls, url: str) -> str:
        # Render commonly provides "postgres://..."; normalize and select driver.
        if "://" in url and "+" not in url.split("://", 1)[0]:
            if url.startswith("postgres://"):
                return url.replace("postgres://", "postgresql+psycopg://", 1)
            if url.startswith("postgresql://"):
                return url.replace("postgresql://", "postgresql+psycopg://", 1)
        return url


@lru_cache()
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
