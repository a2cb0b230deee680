import os
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Slack Incoming Webhook URL - empty means notifications are only logged
    slack_webhook_url: str = ""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000

    # Directory served by the static responder
    static_dir: str = os.getcwd()

    # Outbound webhook timeout in seconds
    webhook_timeout: float = 10.0

    # Largest accepted contact request body in bytes
    max_body_bytes: int = 1_048_576

    log_level: str = "INFO"

    # .env is loaded once by load_dotenv() in contact_relay.main
    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    @field_validator("slack_webhook_url", mode="before")
    @classmethod
    def strip_webhook_url(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @property
    def webhook_configured(self) -> bool:
        """True when a Slack webhook URL has been provided"""
        return bool(self.slack_webhook_url)


@lru_cache
def get_settings():
    return Settings()
