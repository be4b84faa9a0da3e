from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "dev"
    timezone: str | None = None  # None -> host local time
    date_order: Literal["MDY", "DMY", "YMD"] = "MDY"
    prefer_dates_from: Literal["future", "past", "current_period"] = "future"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)


settings = Settings()
