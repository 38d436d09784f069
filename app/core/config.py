from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn, RedisDsn, computed_field
from typing import Optional
from zoneinfo import ZoneInfo

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    # Security: Remove default credentials - require them to be set in .env
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str = "pet_care"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432

    @computed_field
    def DATABASE_URL(self) -> PostgresDsn:
        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    REDIS_URL: RedisDsn = "redis://localhost:6379/0"

    # Push channel for fired notifications (optional)
    TELEGRAM_BOT_TOKEN: Optional[str] = None

    # Shared secret for the backend auth hook and the feed endpoint
    WEBHOOK_SECRET: Optional[str] = None
    APP_DOMAIN: Optional[str] = None

    # Reminder wall-clock times and "same calendar day" are evaluated in this zone
    TIMEZONE: str = "UTC"

    # Global notification permission switch
    NOTIFICATIONS_ENABLED: bool = True

    LOG_LEVEL: str = "INFO"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.TIMEZONE)

settings = Settings()
