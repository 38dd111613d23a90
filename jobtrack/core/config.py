from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_DATA_DIR: str = "./data/requests"
    DISPLAY_TIMEZONE: str = "UTC"

    STATUS_POLL_INTERVAL_SECONDS: float = 3.0
    TEXT_PREVIEW_LENGTH: int = 100

    CUSTOM_STATUS_LABEL_MAX: int = 20
    CUSTOM_STATUS_DESCRIPTION_MAX: int = 100

    REMINDER_WEBHOOK_URL: str | None = None
    REMINDER_WEBHOOK_TOKEN: str | None = None
    REMINDER_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
