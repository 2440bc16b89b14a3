from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    env: str = Field(default="development", alias="APP_ENV")
    host: str = Field(default="0.0.0.0", alias="APP_HOST")
    port: int = Field(default=8000, alias="APP_PORT")
    timezone: str = Field(default="UTC", alias="PRIMARY_TIMEZONE")

    database_url: str = Field(default="sqlite:///./data/lifeline.db", alias="DATABASE_URL")

    api_token: str | None = Field(default=None, alias="API_TOKEN")

    notify_url: str | None = Field(default=None, alias="NOTIFY_URL")
    notify_token: str | None = Field(default=None, alias="NOTIFY_TOKEN")
    notify_timeout_sec: float = Field(default=10.0, alias="NOTIFY_TIMEOUT_SEC")

    donation_interval_days: int = Field(default=56, alias="DONATION_INTERVAL_DAYS")
    unit_volume_ml: int = Field(default=500, alias="UNIT_VOLUME_ML")
    inventory_default_capacity: int = Field(default=100, alias="INVENTORY_DEFAULT_CAPACITY")
    inventory_default_threshold: int = Field(default=10, alias="INVENTORY_DEFAULT_THRESHOLD")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache
def get_settings() -> AppConfig:
    return AppConfig()

