from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "BookMyEnv"
    version: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DATABASE_DSN: str = "sqlite:////tmp/bookmyenv.db"
    REDIS_URL: str = "redis://localhost:6379"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Bearer token auth
    JWT_SECRET: str = "change-me"
    JWT_EXPIRE_MINUTES: int = 480

    # Timezone used when rendering dates in notification text
    DISPLAY_TIMEZONE: str = "UTC"

    # "inline" dispatches in the request, "worker" enqueues an arq job
    NOTIFICATION_DISPATCH_MODE: Literal["inline", "worker"] = "inline"

    # Teams/Slack/custom webhooks are only POSTed when enabled
    NOTIFICATION_WEBHOOK_DELIVERY_ENABLED: bool = False
    NOTIFICATION_WEBHOOK_TIMEOUT: float = 10.0

    @field_validator("DISPLAY_TIMEZONE")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
