from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(
            str(Path(__file__).resolve().parents[2] / ".env"),
            ".env",
        ),
        env_ignore_empty=True,
        extra="ignore",
    )

    smtp_host: str | None = None
    smtp_port: int = 465
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_ssl: bool = True
    smtp_timeout_seconds: float = 10.0
    smtp_from_name: str = "Portfolio Contact"
    contact_recipient_email: str | None = None

    allowed_origins: str = ""
    contact_rate_limit: str = "5/minute"
    rate_limit_storage_uri: str = "memory://"
    max_body_bytes: int = 50 * 1024

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"

    @property
    def allowed_origin_list(self) -> list[str]:
        return [o.strip() for o in str(self.allowed_origins).split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
