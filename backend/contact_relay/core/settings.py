# contact_relay/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional

DEFAULT_CORS_ORIGINS = "https://portfolio-chilengwe-sichalwe.vercel.app,http://localhost:3000"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_title: str = Field(default="Contact Relay", alias="API_TITLE")

    # "development" exposes transport error details in 500 responses
    environment: str = Field(default="production", alias="APP_ENV")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3333, alias="PORT")

    cors_origins: str = Field(default=DEFAULT_CORS_ORIGINS, alias="CORS_ORIGINS")

    # Mail account; for Gmail the password is an app password
    email_user: Optional[str] = Field(default=None, alias="EMAIL_USER")
    email_pass: Optional[str] = Field(default=None, alias="EMAIL_PASS")
    # Recipient of relayed messages; defaults to the account itself
    email_to: Optional[str] = Field(default=None, alias="EMAIL_TO")
    email_from_name: str = Field(default="Portfolio Contact", alias="EMAIL_FROM_NAME")

    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=465, alias="SMTP_PORT")
    smtp_use_ssl: bool = Field(default=True, alias="SMTP_USE_SSL")

    rate_limit_max: int = Field(default=100, alias="RATE_LIMIT_MAX")
    rate_limit_window_seconds: int = Field(default=15 * 60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_message: str = Field(default="Too many requests from this IP", alias="RATE_LIMIT_MESSAGE")

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def recipient(self) -> Optional[str]:
        return self.email_to or self.email_user

settings = Settings()
